"""On-disk store for downloaded gadget packages."""

import typing as t
from pathlib import Path

import aiofiles
import aiofiles.os

from ..infrastructure.logging import get_logger
from ..utils.filename import sanitize_filename

if t.TYPE_CHECKING:
    import loguru

GADGET_EXTENSION = ".gg"


class GadgetStore:
    """Saves gadget packages and keeps the list of installed gadgets.

    save() persists a package as <plugin_id>.gg under the store directory.
    add() registers a saved gadget as installed and returns its index in
    the installed list; adding an installed gadget again returns the
    existing index.
    """

    def __init__(
        self, directory: Path, logger: "loguru.Logger" = get_logger(__name__)
    ) -> None:
        self.directory = directory
        self._logger = logger
        self._installed: list[str] = []

    @property
    def installed(self) -> tuple[str, ...]:
        return tuple(self._installed)

    def path_for(self, plugin_id: str) -> Path:
        return self.directory / f"{sanitize_filename(plugin_id)}{GADGET_EXTENSION}"

    async def save(self, plugin_id: str, payload: bytes) -> bool:
        """Write a package to disk.

        Returns:
            True if the file was written, False on a file system error.
        """
        path = self.path_for(plugin_id)
        try:
            await aiofiles.os.makedirs(self.directory, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(payload)
        except OSError as exc:
            self._logger.error(f"Could not save gadget {plugin_id} to {path}: {exc}")
            return False
        self._logger.debug(f"Saved gadget {plugin_id} ({len(payload)} bytes)")
        return True

    async def has_package(self, plugin_id: str) -> bool:
        return await aiofiles.os.path.exists(self.path_for(plugin_id))

    def add(self, plugin_id: str) -> int:
        """Mark a saved gadget as installed and return its index."""
        if plugin_id in self._installed:
            return self._installed.index(plugin_id)
        self._installed.append(plugin_id)
        self._logger.info(f"Added gadget {plugin_id}")
        return len(self._installed) - 1
