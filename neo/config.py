"""Persisted configuration for neo (~/.config/neo/config.json)."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .core.exceptions import FileSystemError
from .core.interfaces.logger import ILogger
from .core.models.config import NeoConfig

CONFIG_DIR_ENV = "NEO_CONFIG_DIR"
CONFIG_FILENAME = "config.json"


def default_config_dir() -> Path:
    """$NEO_CONFIG_DIR, or ~/.config/neo."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "neo"


def _get_default_config() -> dict[str, Any]:
    """Get default config from Pydantic models."""
    return NeoConfig().to_dict()


def _get_nested(d: dict, key: str, default: Any = None) -> Any:
    """Get a nested key like 'plugins.enabled'."""
    value: Any = d
    for part in key.split("."):
        if not isinstance(value, dict) or part not in value:
            return default
        value = value[part]
    return value


class ConfigManager:
    """
    Reads and writes the persisted configuration file.

    read() never fails: a missing or unreadable file yields defaults.
    write() raises FileSystemError so callers can turn it into a Result.
    """

    def __init__(self, config_dir: Path | None = None, logger: ILogger | None = None) -> None:
        if logger is None:
            from .services.logging import NullLogger

            logger = NullLogger()
        self._config_dir = config_dir or default_config_dir()
        self._logger = logger

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def config_file(self) -> Path:
        return self._config_dir / CONFIG_FILENAME

    @property
    def plugins_dir(self) -> Path:
        return self._config_dir / "plugins"

    def is_initialized(self) -> bool:
        return self.config_file.exists()

    def read_raw(self) -> dict[str, Any]:
        """File contents without defaults; empty if missing or unreadable."""
        if not self.is_initialized():
            return {}
        try:
            data = json.loads(self.config_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            self._logger.warning("Failed to parse config file %s: %s", self.config_file, e)
            return {}
        except OSError as e:
            self._logger.warning("Failed to read config file %s: %s", self.config_file, e)
            return {}
        if not isinstance(data, dict):
            self._logger.warning("Config file %s is not a JSON object", self.config_file)
            return {}
        return data

    def read(self) -> dict[str, Any]:
        """Configuration merged over defaults."""
        raw = self.read_raw()
        if not raw:
            return _get_default_config()
        try:
            return NeoConfig.model_validate(raw).to_dict()
        except PydanticValidationError as e:
            self._logger.warning("Invalid config file %s: %s", self.config_file, e)
            return _get_default_config()

    def write(self, config: dict[str, Any]) -> None:
        """
        Write the configuration file.

        Raises:
            FileSystemError: If the directory or file cannot be written
        """
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(
                json.dumps(config, indent=2, default=str) + "\n", encoding="utf-8"
            )
        except OSError as e:
            self._logger.error("Failed to write config file: %s", e)
            raise FileSystemError(
                f"Failed to write config file: {e}",
                str(self.config_file),
                "write",
                original_error=e,
            ) from e
        self._logger.debug("Config saved to: %s", self.config_file)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a dotted key from the merged configuration."""
        return _get_nested(self.read(), key, default)
