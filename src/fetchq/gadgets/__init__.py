"""Gadget browser consumers of the download task queue."""

from .catalog import Plugin, PluginCatalog
from .plugins import PluginDownloader, PluginDownloadStatus
from .store import GadgetStore
from .thumbnails import ThumbnailFetcher

__all__ = [
    "Plugin",
    "PluginCatalog",
    "PluginDownloader",
    "PluginDownloadStatus",
    "GadgetStore",
    "ThumbnailFetcher",
]
