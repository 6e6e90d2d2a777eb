"""
Shared pytest fixtures for neo tests.

This module provides fixtures for testing the plugin runtime:
- config_dir: Isolated neo configuration directory (NEO_CONFIG_DIR)
- plugins_dir: The plugins directory inside config_dir
- write_plugin: Helper to lay out a plugin directory on disk
- logger: MagicMock logger for asserting on log calls
"""

import json
import os
import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from neo.core.interfaces.logger import ILogger

SIMPLE_PLUGIN_SOURCE = """
class Plugin:
    name = "{name}"
    version = "{version}"

    def __init__(self):
        self.context = None

    def initialize(self, context):
        self.context = context


plugin = Plugin()
"""


@pytest.fixture(autouse=True)
def _clean_neo_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's NEO_* environment out of tests."""
    for key in list(os.environ):
        if key.startswith("NEO_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Create an isolated neo configuration directory.

    NEO_CONFIG_DIR points at it, so code that falls back to the default
    location never touches the real home directory.

    Returns:
        Path to the configuration directory
    """
    path = tmp_path / "neo-config"
    path.mkdir()
    monkeypatch.setenv("NEO_CONFIG_DIR", str(path))
    return path


@pytest.fixture
def plugins_dir(config_dir: Path) -> Path:
    """Plugins directory inside the isolated config dir (created)."""
    path = config_dir / "plugins"
    path.mkdir()
    return path


@pytest.fixture
def write_plugin() -> Callable[..., Path]:
    """
    Helper to write a plugin directory.

    Usage:
        write_plugin(plugins_dir, "hello", {"name": "hello", "version": "1.0.0"})
        write_plugin(plugins_dir, "hello", manifest, source="plugin = ...")

    If ``source`` is omitted and the manifest has name and version, a
    minimal valid plugin module is written. ``manifest`` may be a raw
    string to produce an unparseable manifest.

    Returns:
        Path to the plugin directory
    """

    def _write(
        root: Path,
        dirname: str,
        manifest: dict[str, Any] | str,
        source: str | None = None,
        entry_point: str | None = None,
    ) -> Path:
        plugin_dir = root / dirname
        plugin_dir.mkdir(parents=True)

        if isinstance(manifest, str):
            (plugin_dir / "plugin.json").write_text(manifest)
        else:
            (plugin_dir / "plugin.json").write_text(json.dumps(manifest))

        if source is None and isinstance(manifest, dict) and "name" in manifest:
            source = SIMPLE_PLUGIN_SOURCE.format(
                name=manifest["name"], version=manifest.get("version", "0.0.0")
            )

        if source is not None:
            main = entry_point
            if main is None and isinstance(manifest, dict):
                main = manifest.get("main")
            (plugin_dir / (main or "__init__.py")).write_text(textwrap.dedent(source))

        return plugin_dir

    return _write


@pytest.fixture
def logger() -> MagicMock:
    """MagicMock logger satisfying ILogger."""
    return MagicMock(spec=ILogger)
