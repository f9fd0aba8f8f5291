"""Plugin metadata as listed by the gadget catalog."""

import typing as t

from pydantic import BaseModel, Field


class Plugin(BaseModel):
    """One catalog entry.

    URLs may be absolute or relative to the catalog host.
    """

    id: str = Field(description="Catalog identifier")
    title: str = Field(default="", description="Display title")
    download_url: str | None = Field(default=None, description="Package location")
    thumbnail_url: str | None = Field(default=None, description="Thumbnail location")


class PluginCatalog:
    """Id index over the currently loaded plugin metadata.

    A metadata refresh replaces the whole set, so a plugin looked up before
    a fetch may be gone, or replaced by a newer entry, once it completes.
    Consumers re-resolve by id after every asynchronous step.
    """

    def __init__(self, plugins: t.Iterable[Plugin] = ()) -> None:
        self._index: dict[str, Plugin] = {}
        self.replace(plugins)

    def replace(self, plugins: t.Iterable[Plugin]) -> None:
        self._index = {plugin.id: plugin for plugin in plugins}

    def get(self, plugin_id: str) -> Plugin | None:
        return self._index.get(plugin_id)

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> t.Iterator[Plugin]:
        return iter(list(self._index.values()))
