"""
Application bootstrap for neo.

Builds the container and every long-lived service once per process and
hands them back as a Runtime. Runtime.shutdown() is the matching
teardown and must be called at exit.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..utils.awaitables import run_sync
from .container import Container, Tokens, UseExisting
from .error_handler import ErrorHandler, ErrorRecoveryStrategy
from .exceptions import CommandError, ValidationError
from .interfaces.logger import ILogger
from .interfaces.presenter import IPresenter
from .plugins.command_registry import CommandRegistry
from .plugins.context import PluginContext, create_plugin_context
from .plugins.event_bus import EventBus
from .plugins.loader import PluginLoader
from .plugins.registry import PluginRegistry
from .result import Result, failure, success
from .settings import NeoSettings, load_settings

if TYPE_CHECKING:
    from ..config import ConfigManager

LOG_FILENAME = "neo.log"


@dataclass
class Runtime:
    """The services of one neo process."""

    container: Container
    version: str
    settings: NeoSettings
    config_manager: ConfigManager
    logger: ILogger
    presenter: IPresenter
    event_bus: EventBus
    command_registry: CommandRegistry
    plugin_loader: PluginLoader
    plugin_registry: PluginRegistry
    error_handler: ErrorHandler
    plugins_loaded: bool = False
    closed: bool = field(default=False, repr=False)

    def create_plugin_context(self) -> PluginContext:
        return create_plugin_context(
            version=self.version,
            config_manager=self.config_manager,
            logger=self.logger,
            event_bus=self.event_bus,
            command_registry=self.command_registry,
        )

    def load_plugins(self) -> None:
        """Load, register and initialize plugins unless disabled in settings."""
        if self.plugins_loaded:
            return
        if not self.settings.plugins.enabled:
            self.logger.debug("Plugins are disabled")
            return

        try:
            self.plugin_registry.load_plugins(
                self.plugin_loader,
                self.create_plugin_context(),
                self.settings.plugins.disabled,
            )
        except Exception as e:
            self.logger.warning("Plugin loading failed: %s", e)
            return

        self.plugins_loaded = True
        if self.plugin_registry.size > 0:
            self.logger.debug("Loaded %d plugin(s)", self.plugin_registry.size)
        self.event_bus.emit(
            "plugins:loaded",
            [p.name for p in self.plugin_registry.get_initialized_plugins()],
        )

    def run_command(
        self,
        name: str,
        options: dict[str, Any] | None = None,
        args: list[str] | None = None,
    ) -> Result:
        """
        Dispatch a registered command with lifecycle hooks around it.

        Expected failures come back as a Failure. Exceptions raised by the
        command are passed to on_error hooks and re-raised.
        """
        options = options or {}
        command = self.command_registry.resolve_alias(name)
        if command is None:
            return failure(
                CommandError(
                    f'Unknown command "{name}"',
                    name,
                    suggestions=["Run 'neo commands' to list available commands"],
                )
            )

        validate = getattr(command, "validate", None)
        if callable(validate) and not validate(options):
            return failure(ValidationError(f'Invalid options for command "{command.name}"'))

        self.plugin_registry.execute_before_command(command.name, options)
        self.event_bus.emit("command:before", {"command": command.name, "options": options})

        try:
            result = run_sync(command.execute(options, args or []))
        except Exception as e:
            self.plugin_registry.execute_on_error(e)
            self.event_bus.emit("command:error", {"command": command.name, "error": e})
            raise

        if result is None:
            result = success()

        self.plugin_registry.execute_after_command(command.name, result)
        self.event_bus.emit("command:after", {"command": command.name, "result": result})
        return result

    def shutdown(self, exit_code: int = 0) -> None:
        """Run exit hooks, dispose plugins and release services. Idempotent."""
        if self.closed:
            return
        self.closed = True

        if self.plugins_loaded:
            self.plugin_registry.execute_on_exit(exit_code)
            self.plugin_registry.dispose_all()
        self.event_bus.clear()
        self.container.clear()

        close = getattr(self.logger, "close", None)
        if callable(close):
            close()


def bootstrap(
    config_dir: Path | None = None,
    *,
    verbose: bool = False,
    version: str | None = None,
    settings: NeoSettings | None = None,
    presenter: IPresenter | None = None,
    logger: ILogger | None = None,
    strategies: Iterable[ErrorRecoveryStrategy] = (),
) -> Runtime:
    """
    Bootstrap the neo runtime.

    Args:
        config_dir: Configuration directory (default: $NEO_CONFIG_DIR or ~/.config/neo)
        verbose: Force debug logging to the console
        version: Version reported to plugins (default: installed package version)
        settings: Pre-built settings (default: load_settings(config_dir))
        presenter: Output presenter (default: ConsolePresenter)
        logger: Logger (default: NeoLogger configured from settings)
        strategies: Recovery strategies for the error handler

    Returns:
        A Runtime whose plugins are not yet loaded
    """
    from .. import __version__
    from ..config import ConfigManager, default_config_dir

    config_dir = config_dir or default_config_dir()
    settings = settings or load_settings(config_dir)

    container = Container()
    container.register_value(Tokens.VERSION, version or __version__)
    container.register_value(Tokens.SETTINGS, settings)

    _register_core_services(container, config_dir, settings, verbose, presenter, logger)

    container.register_factory(
        Tokens.CONFIG,
        lambda: ConfigManager(config_dir, container.resolve(Tokens.LOGGER)),
    )
    container.register_factory(
        Tokens.EVENT_BUS, lambda: EventBus(container.resolve(Tokens.LOGGER))
    )
    container.register_factory(Tokens.COMMAND_REGISTRY, CommandRegistry)
    container.register_factory(
        Tokens.PLUGIN_LOADER,
        lambda: PluginLoader(settings.plugins_dir(config_dir), container.resolve(Tokens.LOGGER)),
    )
    container.register_factory(
        Tokens.PLUGIN_REGISTRY,
        lambda: PluginRegistry(
            container.resolve(Tokens.COMMAND_REGISTRY), container.resolve(Tokens.LOGGER)
        ),
    )

    def create_error_handler() -> ErrorHandler:
        handler = ErrorHandler(container.resolve(Tokens.PRESENTER), container.resolve(Tokens.LOGGER))
        for strategy in strategies:
            handler.register_strategy(strategy)
        return handler

    container.register_factory(Tokens.ERROR_HANDLER, create_error_handler)

    # Class tokens alias the named ones
    container.register(ILogger, UseExisting(Tokens.LOGGER))
    container.register(IPresenter, UseExisting(Tokens.PRESENTER))
    container.register(EventBus, UseExisting(Tokens.EVENT_BUS))
    container.register(CommandRegistry, UseExisting(Tokens.COMMAND_REGISTRY))
    container.register(PluginLoader, UseExisting(Tokens.PLUGIN_LOADER))
    container.register(PluginRegistry, UseExisting(Tokens.PLUGIN_REGISTRY))
    container.register(ErrorHandler, UseExisting(Tokens.ERROR_HANDLER))

    runtime = Runtime(
        container=container,
        version=container.resolve(Tokens.VERSION),
        settings=settings,
        config_manager=container.resolve(Tokens.CONFIG),
        logger=container.resolve(Tokens.LOGGER),
        presenter=container.resolve(Tokens.PRESENTER),
        event_bus=container.resolve(Tokens.EVENT_BUS),
        command_registry=container.resolve(Tokens.COMMAND_REGISTRY),
        plugin_loader=container.resolve(Tokens.PLUGIN_LOADER),
        plugin_registry=container.resolve(Tokens.PLUGIN_REGISTRY),
        error_handler=container.resolve(Tokens.ERROR_HANDLER),
    )
    runtime.logger.debug("neo %s bootstrapped (config dir: %s)", runtime.version, config_dir)
    return runtime


def _register_core_services(
    container: Container,
    config_dir: Path,
    settings: NeoSettings,
    verbose: bool,
    presenter: IPresenter | None,
    logger: ILogger | None,
) -> None:
    """Register presenter and logger."""
    from ..presenters.console import ConsolePresenter
    from ..services.logging import NeoLogger

    if presenter is not None:
        container.register_value(Tokens.PRESENTER, presenter)
    else:
        container.register_factory(Tokens.PRESENTER, ConsolePresenter)

    if logger is not None:
        container.register_value(Tokens.LOGGER, logger)
        return

    def create_logger() -> ILogger:
        log_settings = settings.logging
        return NeoLogger(
            level="debug" if verbose else log_settings.level,
            console_enabled=verbose or log_settings.console,
            file_enabled=log_settings.file,
            log_file=config_dir / LOG_FILENAME,
        )

    container.register_factory(Tokens.LOGGER, create_logger)
