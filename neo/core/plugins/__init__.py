"""
Plugin runtime: command registry, event bus, loader, context and lifecycle.
"""

from .command_registry import CommandRegistry, RegisteredCommand
from .context import ConfigurationAdapter, PluginContext, create_plugin_context
from .event_bus import EventBus, EventHandler
from .loader import PluginLoader, is_valid_plugin
from .registry import PluginRegistry, PluginState, RegisteredPlugin

__all__ = [
    "CommandRegistry",
    "ConfigurationAdapter",
    "EventBus",
    "EventHandler",
    "PluginContext",
    "PluginLoader",
    "PluginRegistry",
    "PluginState",
    "RegisteredCommand",
    "RegisteredPlugin",
    "create_plugin_context",
    "is_valid_plugin",
]
