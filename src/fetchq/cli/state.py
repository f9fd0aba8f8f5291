"""CLI state container."""

from ..config.settings import Settings
from ..downloads import DownloadTaskQueue
from ..events import EventEmitter
from ..infrastructure.http import AiohttpFetcher, BaseFetcher
from ..infrastructure.logging import get_logger
from ..tracking import DownloadTracker


class CLIState:
    """Application state container for CLI commands.

    Holds Settings and the factories commands use to build their
    collaborators, so tests can swap any of them out.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def create_fetcher(self) -> AiohttpFetcher:
        return AiohttpFetcher(
            timeout=self.settings.timeout, logger=get_logger("fetchq.http")
        )

    def create_queue(self, fetcher: BaseFetcher) -> DownloadTaskQueue:
        return DownloadTaskQueue(
            fetcher,
            ceiling=self.settings.max_concurrent,
            logger=get_logger("fetchq.queue"),
            emitter=EventEmitter(get_logger("fetchq.events")),
        )

    def create_tracker(self) -> DownloadTracker:
        return DownloadTracker(logger=get_logger("fetchq.tracking"))
