"""fetchq - bounded-concurrency download task queue."""

from .domain import (
    DownloadTask,
    FetchFailed,
    FetchOutcome,
    FetchSucceeded,
    TaskState,
    resolve_url,
)
from .downloads import DownloadTaskQueue
from .events import EventEmitter
from .infrastructure.http import AiohttpFetcher, BaseFetcher
from .tracking import DownloadTracker

__all__ = [
    "DownloadTaskQueue",
    "DownloadTask",
    "TaskState",
    "FetchOutcome",
    "FetchSucceeded",
    "FetchFailed",
    "resolve_url",
    "BaseFetcher",
    "AiohttpFetcher",
    "EventEmitter",
    "DownloadTracker",
]
