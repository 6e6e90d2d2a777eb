"""
Plugin lifecycle registry.

Tracks every loaded plugin through loaded -> initialized -> disposed
(or error), registers plugin commands and fans lifecycle hooks out to
initialized plugins.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ...utils.awaitables import run_sync
from ..interfaces.logger import ILogger
from ..models.command import CommandMetadata
from ..models.plugin import LoadedPlugin
from .command_registry import CommandRegistry

if TYPE_CHECKING:
    from ..interfaces.plugin import IPlugin
    from ..result import Result
    from .context import PluginContext
    from .loader import PluginLoader


class PluginState(str, Enum):
    LOADED = "loaded"
    INITIALIZED = "initialized"
    ERROR = "error"
    DISPOSED = "disposed"


@dataclass
class RegisteredPlugin:
    plugin: IPlugin
    state: PluginState
    path: Path
    error: BaseException | None = None


class PluginRegistry:
    """
    Owns the set of plugins known to the running process.

    Plugin failures in initialize(), dispose() or hooks are logged and
    contained; they never reach the caller.
    """

    def __init__(self, command_registry: CommandRegistry, logger: ILogger | None = None) -> None:
        if logger is None:
            from ...services.logging import NullLogger

            logger = NullLogger()
        self._command_registry = command_registry
        self._logger = logger
        self._plugins: dict[str, RegisteredPlugin] = {}

    def register_plugin(self, loaded: LoadedPlugin) -> None:
        """Track a loaded plugin; a name already tracked is ignored."""
        name = loaded.plugin.name
        if name in self._plugins:
            self._logger.warning('Plugin "%s" is already registered', name)
            return

        self._plugins[name] = RegisteredPlugin(
            plugin=loaded.plugin,
            state=PluginState.LOADED,
            path=loaded.path,
        )
        self._logger.debug("Registered plugin: %s", name)

    def initialize_all(self, context: PluginContext) -> None:
        """
        Initialize every plugin still in the loaded state.

        Commands listed in a plugin's ``commands`` attribute are registered
        with the plugin name as their group.
        """
        for name, registered in self._plugins.items():
            if registered.state is not PluginState.LOADED:
                continue

            try:
                run_sync(registered.plugin.initialize(context))
                registered.state = PluginState.INITIALIZED
                self._register_commands(name, registered.plugin)
            except Exception as e:
                registered.state = PluginState.ERROR
                registered.error = e
                self._logger.warning('Failed to initialize plugin "%s": %s', name, e)
                continue

            self._logger.debug("Initialized plugin: %s", name)

    def _register_commands(self, plugin_name: str, plugin: IPlugin) -> None:
        """
        Register the plugin's commands under its name as group.

        A command that cannot be registered is logged and skipped. A
        ``commands`` attribute that is not iterable raises.
        """
        for command in getattr(plugin, "commands", None) or ():
            command_name = getattr(command, "name", None)
            if not isinstance(command_name, str) or not command_name:
                self._logger.warning(
                    'Plugin "%s" declares a command without a valid name: %r',
                    plugin_name,
                    command_name,
                )
                continue
            try:
                metadata = CommandMetadata(
                    name=command_name,
                    description=getattr(command, "description", None) or None,
                    group=plugin_name,
                    hidden=bool(getattr(command, "hidden", False)),
                )
                self._command_registry.register(command, metadata)
            except Exception as e:
                self._logger.warning('Failed to register command "%s": %s', command_name, e)
                continue
            self._logger.debug(
                'Registered command "%s" from plugin "%s"', command_name, plugin_name
            )

    def dispose_all(self) -> None:
        """Dispose initialized plugins and clear the command registry."""
        for name, registered in self._plugins.items():
            if registered.state is not PluginState.INITIALIZED:
                continue

            dispose = getattr(registered.plugin, "dispose", None)
            try:
                if callable(dispose):
                    run_sync(dispose())
            except Exception as e:
                self._logger.warning('Error disposing plugin "%s": %s', name, e)
                continue

            registered.state = PluginState.DISPOSED
            self._logger.debug("Disposed plugin: %s", name)

        self._command_registry.clear()

    def load_plugins(
        self,
        loader: PluginLoader,
        context: PluginContext,
        disabled: list[str] | tuple[str, ...] = (),
    ) -> None:
        """Load plugins from disk, register them and initialize them."""
        for loaded in loader.load_all_plugins(disabled).values():
            self.register_plugin(loaded)
        self.initialize_all(context)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_plugin(self, name: str) -> IPlugin | None:
        registered = self._plugins.get(name)
        return registered.plugin if registered else None

    def get_loaded_plugins(self) -> list[IPlugin]:
        return [r.plugin for r in self._plugins.values()]

    def get_initialized_plugins(self) -> list[IPlugin]:
        return [
            r.plugin for r in self._plugins.values() if r.state is PluginState.INITIALIZED
        ]

    def get_state(self, name: str) -> PluginState | None:
        registered = self._plugins.get(name)
        return registered.state if registered else None

    def get_registered(self, name: str) -> RegisteredPlugin | None:
        return self._plugins.get(name)

    def items(self) -> list[tuple[str, RegisteredPlugin]]:
        return list(self._plugins.items())

    # -------------------------------------------------------------------------
    # Lifecycle hooks
    # -------------------------------------------------------------------------

    def _run_hook(self, hook_name: str, *args: Any) -> None:
        for plugin in self.get_initialized_plugins():
            hook = getattr(getattr(plugin, "hooks", None), hook_name, None)
            if not callable(hook):
                continue
            try:
                run_sync(hook(*args))
            except Exception as e:
                self._logger.debug('Plugin "%s" %s hook error: %s', plugin.name, hook_name, e)

    def execute_before_command(self, command_name: str, options: Any) -> None:
        self._run_hook("before_command", command_name, options)

    def execute_after_command(self, command_name: str, result: Result) -> None:
        self._run_hook("after_command", command_name, result)

    def execute_on_error(self, error: BaseException) -> None:
        self._run_hook("on_error", error)

    def execute_on_exit(self, code: int) -> None:
        self._run_hook("on_exit", code)

    @property
    def size(self) -> int:
        return len(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)

    def clear(self) -> None:
        self._plugins.clear()
