"""CLI application factory."""

from pathlib import Path
from typing import Optional

import typer

from ..app import create_app
from ..config.settings import LogLevel, Settings, build_settings
from .commands.fetch import fetch
from .state import CLIState


def create_cli_app(settings: Settings | None = None) -> typer.Typer:
    """Create CLI application with optional settings override.

    Args:
        settings: Optional Settings override for testing

    Returns:
        Configured Typer application with commands registered
    """
    app = typer.Typer(
        name="fetchq",
        help="fetchq - Bounded-concurrency fetches for gadget thumbnails and packages",
        no_args_is_help=True,
    )

    @app.callback()
    def setup(
        ctx: typer.Context,
        download_dir: Optional[Path] = typer.Option(
            None,
            "--download-dir",
            "-d",
            help="Directory to save fetched files",
        ),
        ceiling: Optional[int] = typer.Option(
            None,
            "--ceiling",
            "-c",
            help="Maximum number of concurrent fetches",
            min=1,
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Enable verbose output (DEBUG logging)",
        ),
    ) -> None:
        """Global options available to all commands."""
        if settings is not None:
            resolved_settings = settings
        else:
            resolved_settings = build_settings(
                download_dir=download_dir,
                max_concurrent=ceiling,
                log_level=LogLevel.DEBUG if verbose else None,
            )

        create_app(resolved_settings)
        ctx.obj = CLIState(resolved_settings)

    app.command()(fetch)
    return app
