"""Task tracking - observes queue events and keeps per-task state."""

from .base import BaseTracker
from .null import NullTracker
from .tracker import DownloadTracker

__all__ = ["BaseTracker", "DownloadTracker", "NullTracker"]
