"""
Pydantic models for neo.

Configuration, command declarations and plugin manifests.
"""

from .base import ImmutableModel, NeoBaseModel
from .command import CommandArgument, CommandMetadata, CommandOption
from .config import LoggingConfig, NeoConfig, PluginsConfig
from .plugin import (
    DEFAULT_ENTRY_POINT,
    MANIFEST_FILENAME,
    LoadedPlugin,
    NeoManifestOptions,
    PluginManifest,
)

__all__ = [
    "DEFAULT_ENTRY_POINT",
    "MANIFEST_FILENAME",
    "CommandArgument",
    "CommandMetadata",
    "CommandOption",
    "ImmutableModel",
    "LoadedPlugin",
    "LoggingConfig",
    "NeoBaseModel",
    "NeoConfig",
    "NeoManifestOptions",
    "PluginManifest",
    "PluginsConfig",
]
