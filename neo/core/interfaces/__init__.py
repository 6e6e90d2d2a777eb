"""
Protocol definitions for neo's service interfaces.

These define the contracts that implementations and plugins follow.
"""

from .command import ICommand
from .logger import ILogger
from .plugin import (
    ICommandRegistry,
    IConfiguration,
    IEventBus,
    ILifecycleHooks,
    IPlugin,
    IPluginContext,
)
from .presenter import IPresenter

__all__ = [
    "ICommand",
    "ICommandRegistry",
    "IConfiguration",
    "IEventBus",
    "ILifecycleHooks",
    "ILogger",
    "IPlugin",
    "IPluginContext",
    "IPresenter",
]
