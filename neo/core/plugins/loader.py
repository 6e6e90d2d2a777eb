"""
Plugin discovery and loading.

A plugin is a directory under the plugins root holding a plugin.json
manifest and a Python entry module that exposes a ``plugin`` object.
"""

from __future__ import annotations

import importlib.util
import json
import re
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import PluginError
from ..interfaces.logger import ILogger
from ..models.plugin import MANIFEST_FILENAME, LoadedPlugin, PluginManifest

LOAD_FAILURE_SUGGESTIONS = [
    "Check that the entry point is a valid Python module",
    "Ensure all dependencies are installed",
    "Verify the plugin code has no syntax errors",
]

INVALID_EXPORT_SUGGESTIONS = [
    "Ensure the entry module defines a module-level 'plugin' object",
    "The object must satisfy the IPlugin protocol",
    "Required: name (str), version (str), initialize()",
]


def _get_logger() -> ILogger:
    from ...services.logging import NullLogger

    return NullLogger()


def is_valid_plugin(obj: Any) -> bool:
    """Structural check for the IPlugin surface."""
    if obj is None:
        return False
    return (
        isinstance(getattr(obj, "name", None), str)
        and isinstance(getattr(obj, "version", None), str)
        and callable(getattr(obj, "initialize", None))
    )


def _module_name(plugin_name: str) -> str:
    return "neo_plugin_" + re.sub(r"\W", "_", plugin_name)


class PluginLoader:
    """
    Discovers plugin manifests on disk and imports plugin entry modules.

    Each step for one plugin either succeeds or raises/logs for that
    plugin alone; load_all_plugins() keeps going past failures.
    """

    def __init__(self, plugins_dir: Path, logger: ILogger | None = None) -> None:
        self._plugins_dir = Path(plugins_dir)
        self._logger = logger or _get_logger()

    @property
    def plugins_dir(self) -> Path:
        return self._plugins_dir

    def plugins_dir_exists(self) -> bool:
        return self._plugins_dir.is_dir()

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def discover_plugins(self) -> list[PluginManifest]:
        """
        Read every plugin manifest under the plugins root.

        Returns:
            Valid, enabled manifests in directory-name order. A missing
            plugins root gives an empty list.
        """
        if not self.plugins_dir_exists():
            self._logger.debug("Plugins directory does not exist: %s", self._plugins_dir)
            return []

        manifests: list[PluginManifest] = []
        for entry in sorted(self._plugins_dir.iterdir()):
            if not entry.is_dir():
                continue

            manifest = self._read_manifest(entry)
            if manifest is None:
                continue

            if not manifest.is_enabled:
                self._logger.debug('Plugin "%s" is disabled in manifest', manifest.name)
                continue

            if manifest.neo is not None and manifest.neo.min_version:
                # Informational only; not compared against the running version
                self._logger.debug(
                    'Plugin "%s" declares minimum neo version %s',
                    manifest.name,
                    manifest.neo.min_version,
                )

            manifests.append(manifest)
            self._logger.debug("Discovered plugin: %s@%s", manifest.name, manifest.version)

        return manifests

    def _read_manifest(self, plugin_dir: Path) -> PluginManifest | None:
        """Parse one plugin.json; None (with a log entry) if unusable."""
        manifest_path = plugin_dir / MANIFEST_FILENAME
        if not manifest_path.is_file():
            self._logger.debug("Skipping %s: no %s", plugin_dir.name, MANIFEST_FILENAME)
            return None

        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            self._logger.debug("Skipping %s: %s", plugin_dir.name, e)
            return None

        if not isinstance(data, dict):
            self._logger.warning(
                "Invalid plugin manifest in %s: expected a JSON object", plugin_dir.name
            )
            return None

        missing = [key for key in ("name", "version") if not data.get(key)]
        if missing:
            self._logger.warning(
                "Invalid plugin manifest in %s: missing %s", plugin_dir.name, ", ".join(missing)
            )
            return None

        try:
            return PluginManifest.model_validate({**data, "directory": plugin_dir})
        except PydanticValidationError as e:
            self._logger.warning("Invalid plugin manifest in %s: %s", plugin_dir.name, e)
            return None

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_plugin(self, manifest: PluginManifest) -> LoadedPlugin:
        """
        Import a plugin's entry module and validate its ``plugin`` export.

        Raises:
            PluginError: If the entry point is missing, the import fails,
                or the export does not satisfy IPlugin
        """
        plugin_dir = manifest.directory or self._plugins_dir / manifest.name
        entry_point = manifest.entry_point
        module_path = plugin_dir / entry_point

        if not module_path.is_file():
            raise PluginError(
                f'Plugin "{manifest.name}" entry point not found: {entry_point}',
                manifest.name,
                context={"path": str(module_path)},
                suggestions=[
                    f"Ensure {entry_point} exists in the plugin directory",
                    f'Check the "main" field in {MANIFEST_FILENAME}',
                ],
            )

        try:
            module = self._import_module(manifest.name, module_path, plugin_dir)
            plugin = getattr(module, "plugin", None)
            if not is_valid_plugin(plugin):
                raise PluginError(
                    "Invalid plugin export: missing required properties",
                    manifest.name,
                    context={"path": str(module_path)},
                    suggestions=list(INVALID_EXPORT_SUGGESTIONS),
                )
            return LoadedPlugin(manifest=manifest, plugin=plugin, path=plugin_dir)
        except PluginError:
            raise
        except Exception as e:
            raise PluginError(
                f"Failed to load plugin: {e}",
                manifest.name,
                context={"path": str(module_path)},
                suggestions=list(LOAD_FAILURE_SUGGESTIONS),
                original_error=e,
            ) from e

    def _import_module(self, plugin_name: str, module_path: Path, plugin_dir: Path):
        """Load a module from a file path, with the plugin dir as its package path."""
        module_name = _module_name(plugin_name)
        spec = importlib.util.spec_from_file_location(
            module_name,
            module_path,
            submodule_search_locations=[str(plugin_dir)],
        )
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load module from {module_path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
        return module

    def load_all_plugins(self, disabled_names: list[str] | tuple[str, ...] = ()) -> dict[str, LoadedPlugin]:
        """
        Discover and load every plugin not named in ``disabled_names``.

        A plugin that fails to load is logged and skipped.
        """
        plugins: dict[str, LoadedPlugin] = {}
        disabled = set(disabled_names)

        for manifest in self.discover_plugins():
            if manifest.name in disabled:
                self._logger.debug('Plugin "%s" is disabled in configuration', manifest.name)
                continue

            try:
                loaded = self.load_plugin(manifest)
            except PluginError as e:
                self._logger.warning('Failed to load plugin "%s": %s', manifest.name, e.message)
                continue
            except Exception as e:
                self._logger.warning('Failed to load plugin "%s": %s', manifest.name, e)
                continue

            plugins[manifest.name] = loaded
            self._logger.debug("Loaded plugin: %s@%s", manifest.name, manifest.version)

        return plugins
