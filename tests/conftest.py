"""Pytest configuration and fixtures for fetchq tests."""

import typing as t

import loguru
import pytest
import pytest_asyncio
from aiohttp import ClientSession
from blockbuster import BlockBuster, blockbuster_ctx
from typer.testing import CliRunner

from fetchq.app import create_app
from fetchq.config.settings import Environment, LogLevel, Settings
from fetchq.downloads import DownloadTaskQueue
from fetchq.events import BaseEmitter, EventEmitter
from fetchq.infrastructure.http.base import BaseFetcher, SettlementCallback
from fetchq.infrastructure.logging import reset_logging
from fetchq.tracking import DownloadTracker


class StubFetcher(BaseFetcher):
    """Fetcher that never touches the network.

    Requests stay outstanding until a test settles them explicitly, which
    makes every interleaving deterministic.
    """

    def __init__(self) -> None:
        self.requests: dict[int, tuple[str, SettlementCallback]] = {}
        self.issued_urls: list[str] = []
        self.cancelled: list[int] = []
        self.refused_urls: set[str] = set()
        self._next_handle = 0

    def issue(self, url: str, on_settled: SettlementCallback) -> int:
        if url in self.refused_urls:
            raise RuntimeError(f"refused {url}")
        handle = self._next_handle
        self._next_handle += 1
        self.requests[handle] = (url, on_settled)
        self.issued_urls.append(url)
        return handle

    def cancel(self, handle: t.Hashable) -> None:
        self.cancelled.append(t.cast(int, handle))

    def handle_for(self, url: str) -> int:
        for handle, (issued_url, _) in self.requests.items():
            if issued_url == url:
                return handle
        raise KeyError(url)

    async def settle(
        self,
        url: str,
        status: int = 200,
        payload: bytes | None = b"",
        error: str | None = None,
    ) -> None:
        """Deliver the settlement for the oldest outstanding request to url."""
        handle = self.handle_for(url)
        _, on_settled = self.requests.pop(handle)
        await on_settled(status, payload if status == 200 else None, error)


@pytest.fixture(autouse=True)
def blockbuster() -> t.Iterator[BlockBuster]:
    """Detect blocking calls in async event loop during tests.

    This fixture automatically activates Blockbuster for all tests,
    which will raise a BlockingError if any blocking I/O operations
    (like synchronous file.write()) are called within an async context.
    """
    with blockbuster_ctx(
        scanned_modules=["fetchq"],
    ) as bb:
        # Third party modules use these functions, so we deactivate them
        # for now
        bb.functions["os.path.abspath"].deactivate()

        yield bb


@pytest.fixture(autouse=True)
def clean_logging_state():
    """Automatically reset logging before each test for isolation."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def test_settings(tmp_path):
    """Provide test-specific settings."""
    return Settings(
        environment=Environment.TESTING,
        log_level=LogLevel.CRITICAL,  # Minimal logging during tests
        max_concurrent=2,
        download_dir=tmp_path / "downloads",
        timeout=5.0,
    )


@pytest.fixture
def test_app(test_settings):
    """Provide a test app with clean logging state."""
    reset_logging()
    app = create_app(settings=test_settings)
    yield app
    reset_logging()


@pytest.fixture
def mock_logger(mocker):
    """Provide a mock logger for testing that captures log calls."""
    logger = mocker.Mock(spec=loguru.logger)
    return logger


@pytest.fixture
def mock_emitter(mocker):
    """Provide a mock event emitter for testing event emission."""
    emitter = mocker.Mock(spec=BaseEmitter)
    return emitter


@pytest.fixture
def real_emitter(mock_logger):
    """Provide a real EventEmitter for tests that subscribe to events."""
    return EventEmitter(mock_logger)


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher()


@pytest.fixture
def make_queue(
    stub_fetcher: StubFetcher, mock_logger, real_emitter
) -> t.Callable[..., DownloadTaskQueue]:
    """Factory fixture to create queues on the stub fetcher."""

    def _make_queue(ceiling: int = 2, fetcher: BaseFetcher | None = None, emitter=None):
        return DownloadTaskQueue(
            fetcher or stub_fetcher,
            ceiling=ceiling,
            logger=mock_logger,
            emitter=emitter or real_emitter,
        )

    return _make_queue


@pytest.fixture
def recorder():
    """Completion callback that records every outcome per target."""

    class Recorder:
        def __init__(self) -> None:
            self.calls: list[tuple[str, t.Any]] = []

        def __call__(self, target_id: str) -> t.Callable[[t.Any], None]:
            def on_complete(outcome: t.Any) -> None:
                self.calls.append((target_id, outcome))

            return on_complete

        @property
        def targets(self) -> list[str]:
            return [target for target, _ in self.calls]

    return Recorder()


@pytest_asyncio.fixture
async def aio_client():
    """Provide a real aiohttp ClientSession for integration testing."""
    session = ClientSession()
    yield session
    await session.close()


@pytest.fixture
def tracker(mock_logger):
    """Provide a DownloadTracker with mocked logger for testing."""
    return DownloadTracker(logger=mock_logger)


@pytest.fixture
def cli_runner():
    """Provide Typer CLI test runner."""
    return CliRunner()
