"""Thumbnail fetching for a page of catalog entries."""

import inspect
import typing as t

from ..config.settings import DEFAULT_URL_PREFIX
from ..domain.tasks import FetchOutcome
from ..domain.urls import resolve_url
from ..downloads.queue import DownloadTaskQueue
from ..infrastructure.logging import get_logger

if t.TYPE_CHECKING:
    import loguru

ThumbnailCallback = t.Callable[[bytes], t.Awaitable[None] | None]


class ThumbnailFetcher:
    """Loads thumbnail images through a bounded task queue.

    Entries keep their default image until their thumbnail arrives; a
    failed fetch leaves the default in place. When the page is replaced or
    the view closes, cancel_all() drops every outstanding fetch so no
    stale image is delivered.
    """

    def __init__(
        self,
        queue: DownloadTaskQueue,
        url_prefix: str = DEFAULT_URL_PREFIX,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        self._queue = queue
        self._url_prefix = url_prefix
        self._logger = logger

    @property
    def queue(self) -> DownloadTaskQueue:
        return self._queue

    async def request(
        self, target_id: str, url: str | None, on_loaded: ThumbnailCallback
    ) -> bool:
        """Queue a thumbnail fetch for target_id.

        Returns:
            False if there is no thumbnail URL to fetch.
        """
        resolved = resolve_url(url, self._url_prefix)

        async def on_complete(outcome: FetchOutcome) -> None:
            if not outcome.success:
                self._logger.debug(
                    f"Thumbnail for {target_id} unavailable "
                    f"(status {outcome.status_code})"
                )
                return
            result = on_loaded(outcome.payload)
            if inspect.isawaitable(result):
                await result

        task = await self._queue.submit(target_id, resolved, on_complete)
        return task is not None

    async def cancel_all(self) -> int:
        """Drop every queued and running thumbnail fetch."""
        return await self._queue.clear()
