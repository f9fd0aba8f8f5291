"""Fixtures for gadget browser consumers."""

import pytest

from fetchq.gadgets import GadgetStore, Plugin, PluginCatalog, PluginDownloader

PREFIX = "http://gadgets.example.com"


@pytest.fixture
def catalog():
    return PluginCatalog(
        [
            Plugin(
                id="clock",
                title="Clock",
                download_url="/packages/clock.gg",
                thumbnail_url="/thumbs/clock.png",
            ),
            Plugin(
                id="weather",
                title="Weather",
                download_url="https://cdn.example.com/weather.gg",
            ),
            Plugin(id="broken", title="No package"),
        ]
    )


@pytest.fixture
def store(tmp_path, mock_logger):
    return GadgetStore(tmp_path / "gadgets", logger=mock_logger)


@pytest.fixture
def status_changes():
    return []


@pytest.fixture
def downloader(make_queue, catalog, store, status_changes, mock_logger):
    return PluginDownloader(
        make_queue(ceiling=2),
        catalog,
        store,
        url_prefix=PREFIX,
        on_status_change=lambda plugin_id, status: status_changes.append(
            (plugin_id, status)
        ),
        logger=mock_logger,
    )
