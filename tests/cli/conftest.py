"""Shared fixtures for CLI tests."""

import pytest

from fetchq.cli.app import create_cli_app


@pytest.fixture
def cli_app(test_settings):
    """Provide CLI app with test settings injected."""
    return create_cli_app(settings=test_settings)


@pytest.fixture
def download_dir(test_settings):
    return test_settings.download_dir
