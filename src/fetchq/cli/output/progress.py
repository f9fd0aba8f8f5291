"""Result display functions for CLI."""

from pathlib import Path

import typer

from ...domain.tracking import TaskStats


def display_fetch_saved(url: str, path: Path, size: int) -> None:
    """Display a successful fetch.

    Args:
        url: URL that was fetched
        path: Where the payload was written
        size: Payload size in bytes
    """
    typer.secho(f"✓ Fetched: {url}", fg=typer.colors.GREEN)
    typer.echo(f"  Saved to: {path} ({size} bytes)")


def display_fetch_failed(url: str, status_code: int, error: str | None) -> None:
    """Display a failed fetch.

    Args:
        url: URL that failed
        status_code: HTTP status, 0 when no response arrived
        error: Transport error text, if any
    """
    typer.secho(f"✗ Failed: {url}", fg=typer.colors.RED)
    detail = error if error else f"HTTP {status_code}"
    typer.secho(f"  Error: {detail}", fg=typer.colors.RED)


def display_rejected(target: str) -> None:
    typer.secho(f"✗ Skipped: {target!r} has no URL", fg=typer.colors.YELLOW)


def display_summary(stats: TaskStats) -> None:
    typer.echo(
        f"{stats.succeeded} fetched, {stats.failed} failed, "
        f"{stats.rejected} skipped ({stats.succeeded_bytes} bytes)"
    )
