"""
Plugin context factory.

Builds the object handed to each plugin's initialize(): the running
version, a configuration adapter, and the shared logger, event bus and
command registry.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import AppError, ConfigurationError, ValidationError
from ..interfaces.logger import ILogger
from ..models.config import NeoConfig
from ..result import Result, failure, success

if TYPE_CHECKING:
    from ...config import ConfigManager
    from .command_registry import CommandRegistry
    from .event_bus import EventBus

_MISSING = object()


class ConfigurationAdapter:
    """
    Dot-path view over the persisted configuration.

    Reads and writes go to an in-memory copy; save() persists it. The copy
    is filled by load(), which the context factory calls once up front.
    """

    def __init__(self, config_manager: ConfigManager, logger: ILogger) -> None:
        self._manager = config_manager
        self._logger = logger
        self._config: dict[str, Any] = {}
        self._dirty = False

    def get(self, key: str, default: Any = None) -> Any:
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a dotted key, creating intermediate sections as needed."""
        *parents, leaf = key.split(".")
        target = self._config
        for part in parents:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child
        target[leaf] = value
        self._dirty = True

    def has(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def delete(self, key: str) -> None:
        """Remove a dotted key; a missing key is ignored."""
        *parents, leaf = key.split(".")
        target: Any = self._config
        for part in parents:
            target = target.get(part) if isinstance(target, dict) else None
            if target is None:
                return
        if isinstance(target, dict) and leaf in target:
            del target[leaf]
            self._dirty = True

    def clear(self) -> None:
        self._config = {}
        self._dirty = True

    def get_all(self) -> dict[str, Any]:
        return copy.deepcopy(self._config)

    def is_dirty(self) -> bool:
        return self._dirty

    def validate(self) -> Result[None, ValidationError]:
        """Check the in-memory configuration against the NeoConfig model."""
        try:
            NeoConfig.model_validate(self._config)
        except PydanticValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            field = ".".join(str(p) for p in first.get("loc", ())) or None
            return failure(
                ValidationError(
                    f"Invalid configuration: {first.get('msg', e)}",
                    field=field,
                    value=first.get("input"),
                )
            )
        return success()

    def load(self) -> Result[dict[str, Any], AppError]:
        """Replace the in-memory copy with the persisted configuration."""
        try:
            self._config = self._manager.read()
        except Exception as e:
            self._logger.error("Failed to load configuration: %s", e)
            return failure(
                ConfigurationError(f"Failed to load configuration: {e}", original_error=e)
            )
        self._dirty = False
        return success(self.get_all())

    def save(self) -> Result[None, AppError]:
        """Persist the in-memory copy."""
        try:
            self._manager.write(self._config)
        except AppError as e:
            return failure(e)
        except Exception as e:
            self._logger.error("Failed to save configuration: %s", e)
            return failure(
                ConfigurationError(f"Failed to save configuration: {e}", original_error=e)
            )
        self._dirty = False
        return success()


@dataclass(frozen=True)
class PluginContext:
    """Everything a plugin receives in initialize()."""

    version: str
    config: ConfigurationAdapter
    logger: ILogger
    event_bus: EventBus
    command_registry: CommandRegistry


def create_plugin_context(
    version: str,
    config_manager: ConfigManager,
    logger: ILogger,
    event_bus: EventBus,
    command_registry: CommandRegistry,
) -> PluginContext:
    """
    Build the context shared by every plugin.

    The configuration is read once here. A failed read is logged and
    leaves the adapter empty; callers that need fresh values call
    ``context.config.load()``.
    """
    config = ConfigurationAdapter(config_manager, logger)
    result = config.load()
    if not result.success:
        logger.warning("Plugin configuration unavailable: %s", result.error.message)

    return PluginContext(
        version=version,
        config=config,
        logger=logger,
        event_bus=event_bus,
        command_registry=command_registry,
    )
