"""
Built-in Click commands for neo CLI.

Commands are registered with the main CLI group via the
register_commands() function in neo.cli.
"""

from .command_list import commands
from .plugins import plugins

BUILTIN_COMMANDS = [
    commands,
    plugins,
]

__all__ = ["BUILTIN_COMMANDS"]
