"""
Pydantic Settings for neo runtime configuration.

Provides settings loading from the JSON config file, environment
variables, and defaults.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from .models.config import LoggingConfig, PluginsConfig


def _get_logger():
    from ..services.logging import NullLogger

    return NullLogger()


class JsonConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from <config dir>/config.json."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        config_dir: Path | None = None,
    ):
        super().__init__(settings_cls)
        self._config_dir = config_dir
        self._data: dict[str, Any] | None = None

    def _load_json(self) -> dict[str, Any]:
        """Load and cache JSON data."""
        if self._data is not None:
            return self._data

        self._data = {}

        from ..config import CONFIG_FILENAME, default_config_dir

        path = (self._config_dir or default_config_dir()) / CONFIG_FILENAME
        if not path.exists():
            return self._data

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            _get_logger().warning("Failed to parse config file %s: %s", path, e)
            return self._data
        except OSError as e:
            _get_logger().warning("Failed to read config file %s: %s", path, e)
            return self._data

        if isinstance(data, dict):
            # Only the sections NeoSettings knows about
            self._data = {k: data[k] for k in ("logging", "plugins") if k in data}
        return self._data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get field value from JSON data."""
        data = self._load_json()
        field_value = data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all JSON data for settings initialization."""
        return self._load_json()


class NeoSettings(BaseSettings):
    """Neo runtime settings with JSON file and environment variable support.

    Priority (highest to lowest):
    1. Explicit init values
    2. Environment variables (NEO_<section>__<field>)
    3. JSON config file (~/.config/neo/config.json)
    4. Model defaults
    """

    model_config = {
        "env_prefix": "NEO_",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    logging: LoggingConfig = LoggingConfig()
    plugins: PluginsConfig = PluginsConfig()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to add JSON loading.

        Note: settings_customise_sources cannot take arguments, so the
        config directory is passed through a module-level variable.
        """
        json_source = JsonConfigSource(settings_cls, config_dir=_current_config_dir)
        return (
            init_settings,
            env_settings,
            json_source,
        )

    def plugins_dir(self, config_dir: Path) -> Path:
        """Configured plugins directory, or <config dir>/plugins."""
        if self.plugins.directory:
            return Path(self.plugins.directory).expanduser()
        return config_dir / "plugins"


# Module-level variable for passing to settings_customise_sources
_current_config_dir: Path | None = None


def load_settings(config_dir: Path | None = None, **overrides: Any) -> NeoSettings:
    """Load neo settings from config file and environment.

    Args:
        config_dir: Directory holding config.json (default: ~/.config/neo)
        **overrides: Explicit values, highest priority

    Returns:
        NeoSettings instance with all sources merged
    """
    global _current_config_dir

    _current_config_dir = config_dir
    try:
        return NeoSettings(**overrides)
    finally:
        _current_config_dir = None
