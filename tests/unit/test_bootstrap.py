"""
Unit tests for bootstrap() and the Runtime it returns.

Tests verify:
- Container wiring of named and class tokens
- Plugin loading honoring settings
- run_command() dispatch with hooks and events around it
- shutdown() ordering and idempotence
"""

import asyncio
from typing import Any
from unittest.mock import MagicMock

import pytest

from neo.core.bootstrap import bootstrap
from neo.core.container import Tokens
from neo.core.error_handler import ErrorHandler, RetryStrategy
from neo.core.exceptions import CommandError, ValidationError
from neo.core.interfaces.command import ICommand
from neo.core.interfaces.logger import ILogger
from neo.core.interfaces.presenter import IPresenter
from neo.core.plugins.command_registry import CommandRegistry
from neo.core.plugins.event_bus import EventBus
from neo.core.plugins.loader import PluginLoader
from neo.core.plugins.registry import PluginRegistry, PluginState
from neo.core.result import failure, success
from neo.core.settings import load_settings
from neo.services.logging import NeoLogger

HOOKED_PLUGIN_SOURCE = """
from neo.core.result import success

CALLS = []


class Hooks:
    def before_command(self, name, options):
        CALLS.append(("before", name))

    def after_command(self, name, result):
        CALLS.append(("after", name))

    def on_error(self, error):
        CALLS.append(("error", str(error)))

    def on_exit(self, code):
        CALLS.append(("exit", code))


class Greet:
    name = "greet"
    description = "Greet someone"
    aliases = ["hi"]

    def execute(self, options, args=None):
        return success("hello " + " ".join(args or []))


class Explode:
    name = "explode"

    def execute(self, options, args=None):
        raise RuntimeError("kaboom")


class Plugin:
    name = "hooked"
    version = "1.0.0"
    commands = [Greet(), Explode()]
    hooks = Hooks()

    def initialize(self, context):
        CALLS.append(("init", context.version))

    def dispose(self):
        CALLS.append(("dispose",))


plugin = Plugin()
"""


class Command(ICommand):
    def __init__(self, name: str, result: Any = None, valid: bool = True) -> None:
        self._name = name
        self._result = result
        self._valid = valid
        self.calls = []

    @property
    def name(self) -> str:
        return self._name

    def validate(self, options: Any) -> bool:
        return self._valid

    def execute(self, options: dict[str, Any], args: list[str] | None = None):
        self.calls.append((options, args))
        return self._result


@pytest.fixture
def presenter() -> MagicMock:
    return MagicMock(spec=IPresenter)


@pytest.fixture
def runtime(config_dir, presenter, logger):
    runtime = bootstrap(config_dir, version="9.9.9", presenter=presenter, logger=logger)
    yield runtime
    runtime.shutdown()


def _hooked_calls(runtime) -> list:
    plugin = runtime.plugin_registry.get_plugin("hooked")
    return plugin.initialize.__globals__["CALLS"]


class TestContainerWiring:
    """Tests for what bootstrap() registers."""

    def test_named_tokens_resolve_to_runtime_services(self, runtime, presenter, logger) -> None:
        container = runtime.container

        assert container.resolve(Tokens.VERSION) == "9.9.9"
        assert container.resolve(Tokens.PRESENTER) is presenter
        assert container.resolve(Tokens.LOGGER) is logger
        assert container.resolve(Tokens.SETTINGS) is runtime.settings
        assert container.resolve(Tokens.CONFIG) is runtime.config_manager
        assert container.resolve(Tokens.EVENT_BUS) is runtime.event_bus
        assert container.resolve(Tokens.COMMAND_REGISTRY) is runtime.command_registry
        assert container.resolve(Tokens.PLUGIN_LOADER) is runtime.plugin_loader
        assert container.resolve(Tokens.PLUGIN_REGISTRY) is runtime.plugin_registry
        assert container.resolve(Tokens.ERROR_HANDLER) is runtime.error_handler

    @pytest.mark.parametrize(
        "cls,attr",
        [
            (ILogger, "logger"),
            (IPresenter, "presenter"),
            (EventBus, "event_bus"),
            (CommandRegistry, "command_registry"),
            (PluginLoader, "plugin_loader"),
            (PluginRegistry, "plugin_registry"),
            (ErrorHandler, "error_handler"),
        ],
    )
    def test_class_tokens_alias_named_tokens(self, runtime, cls, attr) -> None:
        """Resolving by class yields the same singleton as the named token."""
        assert runtime.container.resolve(cls) is getattr(runtime, attr)

    def test_plugins_dir_from_settings(self, config_dir, tmp_path, logger, presenter) -> None:
        """plugins.directory in settings moves the loader."""
        settings = load_settings(config_dir, plugins={"directory": str(tmp_path / "alt")})

        runtime = bootstrap(config_dir, settings=settings, logger=logger, presenter=presenter)

        assert runtime.plugin_loader.plugins_dir == tmp_path / "alt"

    def test_default_plugins_dir(self, runtime, config_dir) -> None:
        assert runtime.plugin_loader.plugins_dir == config_dir / "plugins"

    def test_strategies_registered(self, config_dir, logger, presenter) -> None:
        strategy = RetryStrategy(sleep=MagicMock())

        runtime = bootstrap(config_dir, logger=logger, presenter=presenter, strategies=[strategy])

        assert runtime.error_handler.strategies == [strategy]

    def test_default_logger_writes_under_config_dir(self, config_dir, presenter) -> None:
        """Without an injected logger a NeoLogger logs to <config dir>/neo.log."""
        runtime = bootstrap(config_dir, presenter=presenter)
        try:
            assert isinstance(runtime.logger, NeoLogger)
            assert runtime.logger.log_file == config_dir / "neo.log"
        finally:
            runtime.shutdown()

    def test_config_dir_defaults_to_env(self, config_dir, presenter, logger) -> None:
        runtime = bootstrap(presenter=presenter, logger=logger)

        assert runtime.config_manager.config_dir == config_dir


class TestLoadPlugins:
    """Tests for Runtime.load_plugins()."""

    def test_loads_and_emits(self, runtime, plugins_dir, write_plugin) -> None:
        """Loaded plugin names are announced on plugins:loaded."""
        write_plugin(plugins_dir, "alpha", {"name": "alpha", "version": "1.0.0"})
        seen = []
        runtime.event_bus.on("plugins:loaded", seen.append)

        runtime.load_plugins()

        assert runtime.plugins_loaded
        assert runtime.plugin_registry.get_state("alpha") is PluginState.INITIALIZED
        assert seen == [["alpha"]]

    def test_plugin_receives_context(self, runtime, plugins_dir, write_plugin) -> None:
        """initialize() gets a context built from the runtime's services."""
        write_plugin(plugins_dir, "alpha", {"name": "alpha", "version": "1.0.0"})

        runtime.load_plugins()

        context = runtime.plugin_registry.get_plugin("alpha").context
        assert context.version == "9.9.9"
        assert context.event_bus is runtime.event_bus
        assert context.command_registry is runtime.command_registry

    def test_disabled_in_settings(self, config_dir, plugins_dir, write_plugin, logger, presenter):
        """plugins.enabled = false skips loading entirely."""
        write_plugin(plugins_dir, "alpha", {"name": "alpha", "version": "1.0.0"})
        settings = load_settings(config_dir, plugins={"enabled": False})
        runtime = bootstrap(config_dir, settings=settings, logger=logger, presenter=presenter)

        runtime.load_plugins()

        assert runtime.plugin_registry.size == 0
        assert not runtime.plugins_loaded

    def test_disabled_names(self, config_dir, plugins_dir, write_plugin, logger, presenter):
        write_plugin(plugins_dir, "alpha", {"name": "alpha", "version": "1.0.0"})
        write_plugin(plugins_dir, "beta", {"name": "beta", "version": "1.0.0"})
        settings = load_settings(config_dir, plugins={"disabled": ["beta"]})
        runtime = bootstrap(config_dir, settings=settings, logger=logger, presenter=presenter)

        runtime.load_plugins()

        assert [p.name for p in runtime.plugin_registry.get_loaded_plugins()] == ["alpha"]

    def test_load_plugins_once(self, runtime, plugins_dir, write_plugin) -> None:
        write_plugin(plugins_dir, "alpha", {"name": "alpha", "version": "1.0.0"})

        runtime.load_plugins()
        runtime.load_plugins()

        assert runtime.plugin_registry.size == 1

    def test_no_plugins_dir(self, runtime) -> None:
        """A missing plugins directory still completes loading."""
        runtime.load_plugins()

        assert runtime.plugins_loaded
        assert runtime.plugin_registry.size == 0


class TestRunCommand:
    """Tests for Runtime.run_command()."""

    def test_unknown_command_is_failure(self, runtime) -> None:
        result = runtime.run_command("nope")

        assert not result.success
        assert isinstance(result.error, CommandError)
        assert result.error.command_name == "nope"
        assert "neo commands" in result.error.suggestions[0]

    def test_runs_command_with_options_and_args(self, runtime) -> None:
        command = Command("build", result=success("built"))
        runtime.command_registry.register(command)

        result = runtime.run_command("build", {"force": True}, ["src"])

        assert result.data == "built"
        assert command.calls == [({"force": True}, ["src"])]

    def test_none_result_becomes_success(self, runtime) -> None:
        runtime.command_registry.register(Command("quiet", result=None))

        result = runtime.run_command("quiet")

        assert result.success
        assert result.data is None

    def test_failure_result_passes_through(self, runtime) -> None:
        error = CommandError("nope", "deploy")
        runtime.command_registry.register(Command("deploy", result=failure(error)))

        result = runtime.run_command("deploy")

        assert result.error is error

    def test_async_execute_is_awaited(self, runtime) -> None:
        class AsyncCommand(Command):
            def execute(self, options, args=None):
                async def _run():
                    await asyncio.sleep(0)
                    return success(len(args or []))

                return _run()

        runtime.command_registry.register(AsyncCommand("count"))

        assert runtime.run_command("count", {}, ["a", "b"]).data == 2

    def test_validate_false_is_validation_failure(self, runtime) -> None:
        command = Command("strict", valid=False)
        runtime.command_registry.register(command)

        result = runtime.run_command("strict", {"bad": 1})

        assert isinstance(result.error, ValidationError)
        assert command.calls == []

    def test_events_around_command(self, runtime) -> None:
        """command:before and command:after carry the command name."""
        events = []
        runtime.event_bus.on("command:before", lambda d: events.append(("before", d["command"])))
        runtime.event_bus.on("command:after", lambda d: events.append(("after", d["command"])))
        runtime.command_registry.register(Command("build", result=success()))

        runtime.run_command("build")

        assert events == [("before", "build"), ("after", "build")]

    def test_raising_command_emits_error_and_reraises(self, runtime) -> None:
        class Broken(Command):
            def execute(self, options, args=None):
                raise RuntimeError("kaboom")

        errors = []
        runtime.event_bus.on("command:error", lambda d: errors.append(d["error"]))
        runtime.command_registry.register(Broken("broken"))

        with pytest.raises(RuntimeError, match="kaboom"):
            runtime.run_command("broken")

        assert str(errors[0]) == "kaboom"

    def test_plugin_hooks_and_aliases(self, runtime, plugins_dir, write_plugin) -> None:
        """Plugin hooks wrap dispatch; command aliases resolve."""
        write_plugin(
            plugins_dir,
            "hooked",
            {"name": "hooked", "version": "1.0.0"},
            source=HOOKED_PLUGIN_SOURCE,
        )
        runtime.load_plugins()

        result = runtime.run_command("hi", {}, ["world"])
        with pytest.raises(RuntimeError):
            runtime.run_command("explode")

        assert result.data == "hello world"
        assert _hooked_calls(runtime) == [
            ("init", "9.9.9"),
            ("before", "greet"),
            ("after", "greet"),
            ("before", "explode"),
            ("error", "kaboom"),
        ]


class TestShutdown:
    """Tests for Runtime.shutdown()."""

    def test_runs_exit_hooks_then_disposes(self, runtime, plugins_dir, write_plugin) -> None:
        write_plugin(
            plugins_dir,
            "hooked",
            {"name": "hooked", "version": "1.0.0"},
            source=HOOKED_PLUGIN_SOURCE,
        )
        runtime.load_plugins()
        calls = _hooked_calls(runtime)

        runtime.shutdown(2)

        assert calls[-2:] == [("exit", 2), ("dispose",)]
        assert runtime.plugin_registry.get_state("hooked") is PluginState.DISPOSED
        assert runtime.command_registry.size == 0

    def test_clears_bus_and_container(self, runtime) -> None:
        runtime.event_bus.on("x", lambda d: None)

        runtime.shutdown()

        assert runtime.event_bus.listener_count("x") == 0
        assert runtime.container.size == 0
        assert runtime.closed

    def test_idempotent(self, runtime, plugins_dir, write_plugin) -> None:
        write_plugin(
            plugins_dir,
            "hooked",
            {"name": "hooked", "version": "1.0.0"},
            source=HOOKED_PLUGIN_SOURCE,
        )
        runtime.load_plugins()
        calls = _hooked_calls(runtime)

        runtime.shutdown(0)
        runtime.shutdown(0)

        assert calls.count(("dispose",)) == 1

    def test_closes_logger(self, config_dir, presenter) -> None:
        logger = MagicMock(spec=NeoLogger)
        runtime = bootstrap(config_dir, presenter=presenter, logger=logger)

        runtime.shutdown()

        logger.close.assert_called_once()
