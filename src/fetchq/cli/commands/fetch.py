"""Fetch command implementation."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
import typer

from ...domain.tasks import FetchOutcome
from ...domain.tracking import TaskStats
from ...domain.urls import resolve_url
from ...downloads import DownloadTaskQueue
from ...utils.filename import deduplicate_filename, generate_filename
from ..output.progress import (
    display_fetch_failed,
    display_fetch_saved,
    display_rejected,
    display_summary,
)
from ..state import CLIState


@dataclass
class FetchResult:
    """What happened to one command-line target."""

    target: str
    url: str | None
    success: bool = False
    path: Path | None = None
    size: int = 0
    status_code: int = 0
    error: str | None = None
    rejected: bool = False


async def fetch_all(
    targets: list[str],
    url_prefix: str,
    download_dir: Path,
    queue: DownloadTaskQueue,
) -> list[FetchResult]:
    """Submit every target to the queue and save successful payloads.

    Args:
        targets: URLs or catalog-relative paths, in submission order
        url_prefix: Base for relative paths
        download_dir: Directory payloads are written to
        queue: Queue to submit through (already wired to its fetcher)

    Returns:
        One result per target, in the order given. Targets whose URLs map
        to the same file name get "-1", "-2", ... before the suffix, in
        target order.
    """
    await aiofiles.os.makedirs(download_dir, exist_ok=True)
    results: list[FetchResult] = []
    taken: set[str] = set()

    for target in targets:
        result = FetchResult(target=target, url=resolve_url(target, url_prefix))
        results.append(result)
        destination = None
        if result.url:
            destination = download_dir / deduplicate_filename(
                generate_filename(result.url), taken
            )

        async def on_complete(
            outcome: FetchOutcome, result=result, path=destination
        ) -> None:
            if not outcome.success:
                result.status_code = outcome.status_code
                result.error = outcome.error
                return
            async with aiofiles.open(path, "wb") as f:
                await f.write(outcome.payload)
            result.success = True
            result.path = path
            result.size = len(outcome.payload)
            result.status_code = 200

        task = await queue.submit(target, result.url, on_complete)
        if task is None:
            result.rejected = True

    await queue.join()
    return results


def display_results(results: list[FetchResult]) -> None:
    for result in results:
        if result.rejected:
            display_rejected(result.target)
        elif result.success and result.path is not None:
            display_fetch_saved(result.url or result.target, result.path, result.size)
        else:
            display_fetch_failed(
                result.url or result.target, result.status_code, result.error
            )


def fetch(
    ctx: typer.Context,
    urls: list[str] = typer.Argument(..., help="URLs or catalog paths to fetch"),
    prefix: Optional[str] = typer.Option(
        None, "--prefix", help="Base URL for relative paths"
    ),
) -> None:
    """Fetch URLs through a bounded download queue.

    Examples:
        fetchq fetch https://example.com/a.png https://example.com/b.png
        fetchq --ceiling 2 fetch /gadgets/clock.gg /gadgets/notes.gg
        fetchq fetch /gadgets/clock.gg --prefix http://mirror.example.com
    """
    state: CLIState = ctx.obj
    url_prefix = prefix or state.settings.url_prefix
    download_dir = state.settings.download_dir

    async def run() -> tuple[list[FetchResult], TaskStats]:
        tracker = state.create_tracker()
        async with state.create_fetcher() as fetcher:
            queue = state.create_queue(fetcher)
            tracker.attach(queue.emitter)
            results = await fetch_all(urls, url_prefix, download_dir, queue)
        return results, tracker.get_stats()

    try:
        results, stats = asyncio.run(run())
    except Exception as e:
        typer.secho(f"Fetch failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    display_results(results)
    display_summary(stats)

    if any(not result.success for result in results):
        raise typer.Exit(code=1)
