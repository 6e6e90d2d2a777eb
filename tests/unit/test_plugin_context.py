"""
Unit tests for the plugin context factory and configuration adapter.
"""

import json
from unittest.mock import MagicMock

import pytest

from neo.config import ConfigManager
from neo.core.exceptions import ConfigurationError, FileSystemError, ValidationError
from neo.core.plugins.command_registry import CommandRegistry
from neo.core.plugins.context import ConfigurationAdapter, PluginContext, create_plugin_context
from neo.core.plugins.event_bus import EventBus


@pytest.fixture
def manager(config_dir, logger) -> ConfigManager:
    return ConfigManager(config_dir, logger)


@pytest.fixture
def adapter(manager, logger) -> ConfigurationAdapter:
    adapter = ConfigurationAdapter(manager, logger)
    adapter.load()
    return adapter


class TestConfigurationAdapter:
    """Tests for dot-path access and persistence."""

    def test_load_fills_defaults(self, adapter) -> None:
        """Loading with no file on disk yields the default configuration."""
        assert adapter.get("plugins.enabled") is True
        assert adapter.get("logging.level") == "warning"
        assert adapter.is_dirty() is False

    def test_get_missing_returns_default(self, adapter) -> None:
        """Unknown paths return the supplied default."""
        assert adapter.get("nope.nothing") is None
        assert adapter.get("nope.nothing", 3) == 3
        assert adapter.get("plugins.enabled.deeper", "x") == "x"

    def test_set_creates_nested_sections(self, adapter) -> None:
        """set() creates intermediate dictionaries and marks the adapter dirty."""
        adapter.set("myplugin.options.color", "blue")

        assert adapter.get("myplugin.options.color") == "blue"
        assert adapter.get("myplugin") == {"options": {"color": "blue"}}
        assert adapter.is_dirty() is True

    def test_set_replaces_scalar_parent(self, adapter) -> None:
        """Setting below a scalar value replaces it with a section."""
        adapter.set("flag", True)
        adapter.set("flag.inner", 1)

        assert adapter.get("flag") == {"inner": 1}

    def test_has_distinguishes_none_values(self, adapter) -> None:
        """A key set to None exists."""
        adapter.set("user.email", None)

        assert adapter.has("user.email")
        assert not adapter.has("user.phone")

    def test_delete(self, adapter) -> None:
        """delete() removes the leaf; missing keys are ignored."""
        adapter.set("a.b", 1)

        adapter.delete("a.b")
        adapter.delete("a.missing")
        adapter.delete("x.y.z")

        assert not adapter.has("a.b")
        assert adapter.get("a") == {}

    def test_clear_and_get_all(self, adapter) -> None:
        """clear() empties the view; get_all() returns a copy."""
        snapshot = adapter.get_all()
        snapshot["plugins"]["enabled"] = False

        assert adapter.get("plugins.enabled") is True

        adapter.clear()

        assert adapter.get_all() == {}
        assert adapter.is_dirty()

    def test_save_persists_and_resets_dirty(self, adapter, manager) -> None:
        """save() writes through the config manager."""
        adapter.set("myplugin.token", "abc")

        result = adapter.save()

        assert result.success
        assert adapter.is_dirty() is False
        written = json.loads(manager.config_file.read_text())
        assert written["myplugin"] == {"token": "abc"}

    def test_saved_values_survive_reload(self, adapter, manager, logger) -> None:
        """Unknown top-level sections round-trip through the file."""
        adapter.set("myplugin.token", "abc")
        adapter.save()

        fresh = ConfigurationAdapter(manager, logger)
        fresh.load()

        assert fresh.get("myplugin.token") == "abc"

    def test_save_failure_returns_failure(self, logger) -> None:
        """A write error comes back as a Failure, not an exception."""
        manager = MagicMock()
        manager.write.side_effect = FileSystemError("disk full", "/x/config.json", "write")
        adapter = ConfigurationAdapter(manager, logger)

        result = adapter.save()

        assert not result.success
        assert isinstance(result.error, FileSystemError)

    def test_save_unexpected_failure_is_configuration_error(self, logger) -> None:
        """Unexpected exceptions from the manager are wrapped."""
        manager = MagicMock()
        manager.write.side_effect = RuntimeError("weird")
        adapter = ConfigurationAdapter(manager, logger)

        result = adapter.save()

        assert not result.success
        assert isinstance(result.error, ConfigurationError)
        assert isinstance(result.error.original_error, RuntimeError)

    def test_load_failure_returns_failure(self, logger) -> None:
        """A read error comes back as a ConfigurationError failure."""
        manager = MagicMock()
        manager.read.side_effect = RuntimeError("unreadable")
        adapter = ConfigurationAdapter(manager, logger)

        result = adapter.load()

        assert not result.success
        assert isinstance(result.error, ConfigurationError)
        logger.error.assert_called_once()

    def test_validate_accepts_defaults(self, adapter) -> None:
        """The loaded default configuration is valid."""
        assert adapter.validate().success

    def test_validate_rejects_ill_typed_section(self, adapter) -> None:
        """A section of the wrong type fails validation."""
        adapter.set("logging.level", "loud")

        result = adapter.validate()

        assert not result.success
        assert isinstance(result.error, ValidationError)
        assert result.error.field == "logging.level"


class TestCreatePluginContext:
    """Tests for create_plugin_context()."""

    def test_context_shares_services(self, manager, logger) -> None:
        """The context carries the shared instances by reference."""
        bus = EventBus(logger)
        registry = CommandRegistry()

        context = create_plugin_context("1.2.3", manager, logger, bus, registry)

        assert isinstance(context, PluginContext)
        assert context.version == "1.2.3"
        assert context.logger is logger
        assert context.event_bus is bus
        assert context.command_registry is registry

    def test_context_reads_config_up_front(self, manager, logger) -> None:
        """Configuration is available without calling load()."""
        manager.write({"myplugin": {"enabled": True}})

        context = create_plugin_context("1.0.0", manager, logger, EventBus(), CommandRegistry())

        assert context.config.get("myplugin.enabled") is True

    def test_context_survives_read_failure(self, logger) -> None:
        """A failing initial read is logged and leaves an empty configuration."""
        manager = MagicMock()
        manager.read.side_effect = RuntimeError("nope")

        context = create_plugin_context("1.0.0", manager, logger, EventBus(), CommandRegistry())

        assert context.config.get_all() == {}
        logger.warning.assert_called_once()

    def test_context_is_frozen(self, manager, logger) -> None:
        """Plugins cannot swap out the shared services."""
        context = create_plugin_context("1.0.0", manager, logger, EventBus(), CommandRegistry())

        with pytest.raises(AttributeError):
            context.version = "2.0.0"  # type: ignore[misc]
