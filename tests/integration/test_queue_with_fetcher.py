"""Integration tests for DownloadTaskQueue driving AiohttpFetcher."""

import asyncio

import aiohttp
import pytest
from aioresponses import CallbackResult, aioresponses

from fetchq.domain import FetchFailed, FetchSucceeded
from fetchq.downloads import DownloadTaskQueue
from fetchq.events import EventEmitter
from fetchq.gadgets import (
    GadgetStore,
    Plugin,
    PluginCatalog,
    PluginDownloader,
    PluginDownloadStatus,
)
from fetchq.infrastructure.http import AiohttpFetcher
from fetchq.tracking import DownloadTracker


class TestQueueWithFetcher:
    @pytest.mark.asyncio
    async def test_mixed_outcomes(self, aio_client, mock_logger):
        outcomes = {}

        def record(target_id):
            def on_complete(outcome):
                outcomes[target_id] = outcome

            return on_complete

        with aioresponses() as mock:
            mock.get("http://example.com/ok", status=200, body=b"ok")
            mock.get("http://example.com/missing", status=404)
            mock.get(
                "http://example.com/down",
                exception=aiohttp.ClientConnectionError("refused"),
            )

            fetcher = AiohttpFetcher(session=aio_client, logger=mock_logger)
            queue = DownloadTaskQueue(fetcher, ceiling=2, logger=mock_logger)
            for name in ("ok", "missing", "down"):
                await queue.submit(name, f"http://example.com/{name}", record(name))
            await queue.join(timeout=5)

        assert outcomes["ok"] == FetchSucceeded(payload=b"ok")
        assert outcomes["missing"] == FetchFailed(status_code=404)
        assert outcomes["down"].status_code == 0
        assert queue.is_idle

    @pytest.mark.asyncio
    async def test_ceiling_holds_with_real_requests(self, aio_client, mock_logger):
        ceiling = 2
        active = 0
        peak = 0

        async def slow_response(url, **kwargs):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return CallbackResult(status=200, body=b"x")

        urls = [f"http://example.com/{i}" for i in range(6)]
        settled = []

        with aioresponses() as mock:
            for url in urls:
                mock.get(url, callback=slow_response)

            fetcher = AiohttpFetcher(session=aio_client, logger=mock_logger)
            queue = DownloadTaskQueue(fetcher, ceiling=ceiling, logger=mock_logger)
            for i, url in enumerate(urls):
                await queue.submit(str(i), url, lambda o, i=i: settled.append(i))
            await queue.join(timeout=5)

        assert peak == ceiling
        assert sorted(settled) == list(range(6))

    @pytest.mark.asyncio
    async def test_clear_cancels_real_requests(self, aio_client, mock_logger):
        release = asyncio.Event()
        settled = []

        async def blocked(url, **kwargs):
            await release.wait()
            return CallbackResult(status=200, body=b"late")

        with aioresponses() as mock:
            mock.get("http://example.com/a", callback=blocked)
            mock.get("http://example.com/b", callback=blocked)

            async with AiohttpFetcher(session=aio_client, logger=mock_logger) as fetcher:
                queue = DownloadTaskQueue(fetcher, ceiling=1, logger=mock_logger)
                await queue.submit("a", "http://example.com/a", settled.append)
                await queue.submit("b", "http://example.com/b", settled.append)
                await asyncio.sleep(0)

                assert await queue.clear() == 2
                release.set()
                await asyncio.sleep(0.01)

        assert settled == []
        assert queue.is_idle


class TestPluginDownloadIntegration:
    @pytest.mark.asyncio
    async def test_catalog_download_end_to_end(self, aio_client, mock_logger, tmp_path):
        catalog = PluginCatalog(
            [
                Plugin(id="clock", download_url="/packages/clock.gg"),
                Plugin(id="notes", download_url="http://cdn.example.com/notes.gg"),
            ]
        )
        store = GadgetStore(tmp_path, logger=mock_logger)
        emitter = EventEmitter(mock_logger)
        tracker = DownloadTracker(logger=mock_logger)
        tracker.attach(emitter)

        with aioresponses() as mock:
            mock.get("http://gadgets.example.com/packages/clock.gg", status=200, body=b"c")
            mock.get("http://cdn.example.com/notes.gg", status=500)

            fetcher = AiohttpFetcher(session=aio_client, logger=mock_logger)
            queue = DownloadTaskQueue(
                fetcher, ceiling=1, logger=mock_logger, emitter=emitter
            )
            downloader = PluginDownloader(
                queue,
                catalog,
                store,
                url_prefix="http://gadgets.example.com",
                logger=mock_logger,
            )
            for plugin in catalog:
                await downloader.download(plugin)
            await queue.join(timeout=5)

        assert downloader.get_status("clock") == PluginDownloadStatus.ADDED
        assert downloader.get_status("notes") == PluginDownloadStatus.ERROR
        assert store.installed == ("clock",)
        stats = tracker.get_stats()
        assert stats.succeeded == 1
        assert stats.failed == 1
