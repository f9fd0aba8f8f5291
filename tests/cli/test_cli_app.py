"""Tests for CLI application wiring."""

from fetchq.cli.app import create_cli_app
from fetchq.cli.state import CLIState
from fetchq.downloads import DownloadTaskQueue
from fetchq.events import EventEmitter
from fetchq.infrastructure.http import AiohttpFetcher


class TestCLIApp:
    def test_no_args_shows_help(self, cli_runner):
        result = cli_runner.invoke(create_cli_app(), [])
        assert "fetch" in result.output

    def test_help_lists_global_options(self, cli_runner):
        result = cli_runner.invoke(create_cli_app(), ["--help"])

        assert result.exit_code == 0
        assert "--ceiling" in result.output
        assert "--download-dir" in result.output

    def test_ceiling_must_be_positive(self, cli_runner):
        result = cli_runner.invoke(
            create_cli_app(), ["-c", "0", "fetch", "https://example.com/a.png"]
        )
        assert result.exit_code == 2

    def test_fetch_requires_urls(self, cli_runner, cli_app):
        result = cli_runner.invoke(cli_app, ["fetch"])
        assert result.exit_code == 2


class TestCLIState:
    def test_factories_follow_settings(self, test_settings):
        state = CLIState(test_settings)

        fetcher = state.create_fetcher()
        queue = state.create_queue(fetcher)

        assert isinstance(fetcher, AiohttpFetcher)
        assert isinstance(queue, DownloadTaskQueue)
        assert queue.ceiling == test_settings.max_concurrent
        assert isinstance(queue.emitter, EventEmitter)
