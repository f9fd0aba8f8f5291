"""Download operations - the bounded task queue."""

from ..domain.exceptions import InvalidCeilingError
from .queue import DEFAULT_CEILING, DownloadTaskQueue

__all__ = [
    "DownloadTaskQueue",
    "DEFAULT_CEILING",
    "InvalidCeilingError",
]
