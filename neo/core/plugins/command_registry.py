"""
Command registry shared by the host and its plugins.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..interfaces.command import ICommand
from ..models.command import CommandMetadata


@dataclass(frozen=True)
class RegisteredCommand:
    command: ICommand
    metadata: CommandMetadata | None


class CommandRegistry:
    """
    Name-keyed registry of dispatchable commands.

    Registering a name that is already taken fails, so a plugin can
    never replace a host command or another plugin's command.
    """

    def __init__(self) -> None:
        self._commands: dict[str, RegisteredCommand] = {}

    def register(self, command: ICommand, metadata: CommandMetadata | None = None) -> None:
        """
        Register a command with optional metadata.

        Raises:
            ValueError: If a command with the same name is already registered
        """
        if command.name in self._commands:
            raise ValueError(f'Command "{command.name}" is already registered')
        self._commands[command.name] = RegisteredCommand(command, metadata)

    def unregister(self, command_name: str) -> None:
        """Remove a command; unknown names are ignored."""
        self._commands.pop(command_name, None)

    def get(self, command_name: str) -> ICommand | None:
        registered = self._commands.get(command_name)
        return registered.command if registered else None

    def get_all(self) -> list[ICommand]:
        return [r.command for r in self._commands.values()]

    def get_by_group(self, group: str) -> list[ICommand]:
        """Commands whose registration metadata names this group."""
        return [
            r.command
            for r in self._commands.values()
            if r.metadata is not None and r.metadata.group == group
        ]

    def has_command(self, command_name: str) -> bool:
        return command_name in self._commands

    def get_metadata(self, command_name: str) -> CommandMetadata | None:
        registered = self._commands.get(command_name)
        return registered.metadata if registered else None

    def get_names(self) -> list[str]:
        return list(self._commands)

    def resolve_alias(self, name: str) -> ICommand | None:
        """Look a command up by name, then by metadata or command aliases."""
        command = self.get(name)
        if command is not None:
            return command
        for registered in self._commands.values():
            aliases = list(getattr(registered.command, "aliases", None) or [])
            if registered.metadata is not None:
                aliases.extend(registered.metadata.aliases)
            if name in aliases:
                return registered.command
        return None

    def clear(self) -> None:
        self._commands.clear()

    @property
    def size(self) -> int:
        return len(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, command_name: object) -> bool:
        return command_name in self._commands
