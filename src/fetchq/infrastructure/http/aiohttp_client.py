"""aiohttp-backed fetcher.

Each issued request runs as its own asyncio task; the task object doubles
as the cancellation handle.
"""

import asyncio
import ssl
import typing as t

import aiohttp
import certifi

from ...domain.exceptions import ClientNotInitialisedError
from ...domain.tasks import HTTP_OK, TRANSPORT_FAILURE_STATUS
from ..logging import get_logger
from .base import BaseFetcher, SettlementCallback

if t.TYPE_CHECKING:
    import loguru

# Built once at import so certificate loading never runs inside the event loop.
# certifi's bundle gives the same trust store on every platform.
_SSL_CONTEXT = ssl.create_default_context(cafile=certifi.where())


class AiohttpFetcher(BaseFetcher):
    """Fetches URLs with an aiohttp ClientSession.

    The fetcher creates its own session on open() unless one is injected.
    Only a session it created is closed on close(); an injected session
    belongs to the caller.

    Usage:
        async with AiohttpFetcher(timeout=30) as fetcher:
            queue = DownloadTaskQueue(fetcher, ceiling=6)
            ...
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout: float | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        """Initialise the fetcher.

        Args:
            session: Existing session to use. If None, one is created by open().
            timeout: Total timeout per request in seconds. None disables it.
            logger: Logger for request lifecycle messages.
        """
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._logger = logger
        self._requests: set[asyncio.Task[None]] = set()

    async def __aenter__(self) -> "AiohttpFetcher":
        await self.open()
        return self

    async def __aexit__(self, *args: t.Any) -> None:
        await self.close()

    async def open(self) -> None:
        """Create the HTTP session if needed. Idempotent."""
        if self._session is not None:
            return
        connector = aiohttp.TCPConnector(ssl=_SSL_CONTEXT)
        self._session = aiohttp.ClientSession(connector=connector)
        self._owns_session = True

    async def close(self) -> None:
        """Cancel outstanding requests and close the session if we own it."""
        for request in list(self._requests):
            request.cancel()
        if self._requests:
            await asyncio.gather(*self._requests, return_exceptions=True)
        if self._owns_session and self._session is not None:
            await self._session.close()

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    @property
    def active_requests(self) -> int:
        """Number of requests issued and not yet finished."""
        return len(self._requests)

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise ClientNotInitialisedError(
                "HTTP session not initialised; use 'async with' or call open()"
            )
        return self._session

    def issue(self, url: str, on_settled: SettlementCallback) -> asyncio.Task[None]:
        """Start a GET request in the background.

        Raises:
            ClientNotInitialisedError: If no session is available.
        """
        session = self.session
        request = asyncio.create_task(
            self._fetch(session, url, on_settled), name=f"fetch:{url}"
        )
        self._requests.add(request)
        request.add_done_callback(self._requests.discard)
        return request

    def cancel(self, handle: t.Hashable) -> None:
        if isinstance(handle, asyncio.Task):
            handle.cancel()
        else:
            self._logger.warning(f"Ignoring cancel for unknown handle {handle!r}")

    async def _fetch(
        self,
        session: aiohttp.ClientSession,
        url: str,
        on_settled: SettlementCallback,
    ) -> None:
        payload: bytes | None = None
        error: str | None = None
        try:
            self._logger.debug(f"GET {url}")
            async with session.get(url, timeout=self._timeout) as response:
                status = response.status
                if status == HTTP_OK:
                    payload = await response.read()
        except asyncio.CancelledError:
            self._logger.debug(f"Request cancelled: {url}")
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            status = TRANSPORT_FAILURE_STATUS
            error = f"{type(exc).__name__}: {exc}"
            self._logger.error(f"Request to {url} failed: {error}")

        if status != HTTP_OK and error is None:
            self._logger.error(f"Request to {url} returned status {status}")

        try:
            await on_settled(status, payload, error)
        except Exception:
            self._logger.exception(f"Settlement handler failed for {url}")
