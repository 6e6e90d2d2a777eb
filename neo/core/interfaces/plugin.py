"""
Plugin-facing protocols.

Plugins are externally authored, so these are structural Protocols: a
plugin object only has to look right, it never imports a base class.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ..result import Result

if TYPE_CHECKING:
    from .command import ICommand
    from .logger import ILogger


class IConfiguration(Protocol):
    """Dot-path view over the persisted configuration."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def has(self, key: str) -> bool: ...

    def delete(self, key: str) -> None: ...

    def clear(self) -> None: ...

    def get_all(self) -> dict[str, Any]: ...

    def validate(self) -> Result: ...

    def load(self) -> Result: ...

    def save(self) -> Result: ...


class IEventBus(Protocol):
    def emit(self, event: str, data: Any = None) -> None: ...

    def on(self, event: str, handler: Any) -> None: ...

    def off(self, event: str, handler: Any) -> None: ...

    def once(self, event: str, handler: Any) -> None: ...


class ICommandRegistry(Protocol):
    def register(self, command: ICommand, metadata: Any = None) -> None: ...

    def unregister(self, command_name: str) -> None: ...

    def get(self, command_name: str) -> ICommand | None: ...

    def get_all(self) -> list[ICommand]: ...

    def get_by_group(self, group: str) -> list[ICommand]: ...

    def has_command(self, command_name: str) -> bool: ...


class IPluginContext(Protocol):
    """What a plugin receives in initialize()."""

    version: str
    config: IConfiguration
    logger: ILogger
    event_bus: IEventBus
    command_registry: ICommandRegistry


class ILifecycleHooks(Protocol):
    """Optional hooks; a plugin may implement any subset."""

    def before_command(self, command_name: str, options: Any) -> Awaitable[None] | None: ...

    def after_command(self, command_name: str, result: Result) -> Awaitable[None] | None: ...

    def on_error(self, error: BaseException) -> Awaitable[None] | None: ...

    def on_exit(self, code: int) -> Awaitable[None] | None: ...


@runtime_checkable
class IPlugin(Protocol):
    """Required surface of a plugin's exported ``plugin`` object.

    Optional extras read with getattr(): description, author, homepage,
    commands (list of ICommand), hooks (ILifecycleHooks), dispose().
    """

    name: str
    version: str

    def initialize(self, context: IPluginContext) -> Awaitable[None] | None: ...
