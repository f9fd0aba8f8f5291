"""Gadget package downloads for the gadget browser."""

import typing as t
from enum import Enum

from ..config.settings import DEFAULT_URL_PREFIX
from ..domain.tasks import FetchOutcome
from ..domain.urls import resolve_url
from ..downloads.queue import DownloadTaskQueue
from ..infrastructure.logging import get_logger
from .catalog import Plugin, PluginCatalog
from .store import GadgetStore

if t.TYPE_CHECKING:
    import loguru


class PluginDownloadStatus(Enum):
    """Per-plugin download state shown on the add button."""

    NONE = "none"
    DOWNLOADING = "downloading"
    ADDED = "added"
    ERROR = "error"


StatusListener = t.Callable[[str, PluginDownloadStatus], None]


class PluginDownloader:
    """Downloads gadget packages through a bounded task queue.

    A successful download is saved to the store and, unless it updates an
    already installed gadget, added to the installed list. Because the
    catalog can be refreshed while a download is in flight, the plugin is
    looked up again by id when the download completes; if it has vanished
    the payload is discarded.

    Usage:
        downloader = PluginDownloader(queue, catalog, store)
        await downloader.download(catalog.get("clock"))
        await queue.join()
        downloader.get_status("clock")  # PluginDownloadStatus.ADDED
    """

    def __init__(
        self,
        queue: DownloadTaskQueue,
        catalog: PluginCatalog,
        store: GadgetStore,
        url_prefix: str = DEFAULT_URL_PREFIX,
        on_status_change: StatusListener | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        """Initialise the downloader.

        Args:
            queue: Queue the package fetches go through.
            catalog: Current plugin metadata, used to re-resolve plugins.
            store: Where packages are saved and installed.
            url_prefix: Base for relative download URLs.
            on_status_change: Called with (plugin_id, status) on every change.
            logger: Logger for download lifecycle messages.
        """
        self._queue = queue
        self._catalog = catalog
        self._store = store
        self._url_prefix = url_prefix
        self._on_status_change = on_status_change
        self._logger = logger
        self._statuses: dict[str, PluginDownloadStatus] = {}

    @property
    def queue(self) -> DownloadTaskQueue:
        return self._queue

    def get_status(self, plugin_id: str) -> PluginDownloadStatus:
        return self._statuses.get(plugin_id, PluginDownloadStatus.NONE)

    async def download(self, plugin: Plugin, is_updating: bool = False) -> bool:
        """Start downloading a plugin's package.

        Args:
            plugin: Catalog entry to download.
            is_updating: If True the package replaces an installed gadget
                        and is saved without being added again.

        Returns:
            True if the download was queued, False if the plugin has no
            download URL (its status is set to ERROR).
        """
        url = resolve_url(plugin.download_url, self._url_prefix)
        if url is None:
            self._logger.warning(f"Plugin {plugin.id} has no download URL")
            self._set_status(plugin.id, PluginDownloadStatus.ERROR)
            return False

        self._logger.debug(f"Start downloading gadget: {url}")
        plugin_id = plugin.id

        async def on_complete(outcome: FetchOutcome) -> None:
            await self._on_downloaded(plugin_id, url, outcome, is_updating)

        self._set_status(plugin_id, PluginDownloadStatus.DOWNLOADING)
        task = await self._queue.submit(plugin_id, url, on_complete)
        if task is None:
            self._set_status(plugin_id, PluginDownloadStatus.ERROR)
            return False
        return True

    async def cancel_all(self) -> None:
        """Abandon every queued and running download (view closed)."""
        await self._queue.clear()
        for plugin_id, status in list(self._statuses.items()):
            if status == PluginDownloadStatus.DOWNLOADING:
                self._set_status(plugin_id, PluginDownloadStatus.NONE)

    async def _on_downloaded(
        self,
        plugin_id: str,
        url: str,
        outcome: FetchOutcome,
        is_updating: bool,
    ) -> None:
        if not outcome.success:
            self._logger.error(
                f"Download request {url} returned status: {outcome.status_code}"
            )
            self._set_status(plugin_id, PluginDownloadStatus.ERROR)
            return

        self._logger.debug(f"Finished downloading a gadget: {url}")
        # The catalog may have been refreshed while the fetch was in flight
        plugin = self._catalog.get(plugin_id)
        if plugin is None:
            self._logger.info(f"Plugin {plugin_id} left the catalog; discarding")
            self._statuses.pop(plugin_id, None)
            return

        added = False
        if await self._store.save(plugin.id, outcome.payload):
            added = is_updating or self._store.add(plugin.id) >= 0
        self._set_status(
            plugin.id,
            PluginDownloadStatus.ADDED if added else PluginDownloadStatus.ERROR,
        )

    def _set_status(self, plugin_id: str, status: PluginDownloadStatus) -> None:
        self._statuses[plugin_id] = status
        if self._on_status_change is not None:
            self._on_status_change(plugin_id, status)
