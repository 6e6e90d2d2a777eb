"""
Plugin manifest and load-result models.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ConfigDict, Field

from .base import ImmutableModel

if TYPE_CHECKING:
    from ..interfaces.plugin import IPlugin

MANIFEST_FILENAME = "plugin.json"
DEFAULT_ENTRY_POINT = "__init__.py"


class NeoManifestOptions(ImmutableModel):
    """The ``neo`` block of a plugin manifest."""

    model_config = ConfigDict(
        frozen=True,
        strict=False,
        extra="ignore",
        populate_by_name=True,
    )

    min_version: str | None = Field(default=None, alias="minVersion")
    enabled: bool | None = None


class PluginManifest(ImmutableModel):
    """Declared identity of a plugin, read from its plugin.json.

    ``directory`` is where the manifest was found; it is not part of the
    file and is excluded from dumps.
    """

    model_config = ConfigDict(
        frozen=True,
        strict=False,
        extra="ignore",  # manifests commonly carry unrelated packaging keys
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    name: str
    version: str
    description: str | None = None
    main: str | None = None
    author: str | dict[str, Any] | None = None
    homepage: str | None = None
    neo: NeoManifestOptions | None = None
    directory: Path | None = Field(default=None, exclude=True)

    @property
    def entry_point(self) -> str:
        return self.main or DEFAULT_ENTRY_POINT

    @property
    def is_enabled(self) -> bool:
        return not (self.neo is not None and self.neo.enabled is False)


@dataclass(frozen=True)
class LoadedPlugin:
    """A manifest paired with its validated plugin object."""

    manifest: PluginManifest
    plugin: IPlugin
    path: Path
