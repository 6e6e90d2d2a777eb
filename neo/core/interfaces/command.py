"""
Command interface definitions.

Commands registered into the CommandRegistry implement ICommand (or
provide the same attributes duck-typed, as plugins often do).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Any

from ..models.command import CommandArgument, CommandOption
from ..result import Result


class ICommand(ABC):
    """
    Interface for dispatchable commands.

    Commands return a Result instead of raising for expected failures
    and never call sys.exit() themselves.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique command name (e.g., 'hello')."""
        pass

    @property
    def description(self) -> str:
        """Short description for help listing."""
        return ""

    @property
    def aliases(self) -> list[str]:
        return []

    @property
    def options(self) -> list[CommandOption]:
        return []

    @property
    def arguments(self) -> list[CommandArgument]:
        return []

    @property
    def examples(self) -> list[str]:
        return []

    @property
    def hidden(self) -> bool:
        return False

    @abstractmethod
    def execute(
        self, options: dict[str, Any], args: list[str] | None = None
    ) -> Result | Awaitable[Result]:
        """
        Execute the command.

        Args:
            options: Parsed option values keyed by parameter name
            args: Positional argument values

        Returns:
            Result (or an awaitable resolving to one)
        """
        pass

    def validate(self, options: Any) -> bool:
        """Check raw options before execute(). Default accepts anything."""
        return True

    def get_help(self) -> str:
        """Return detailed help text."""
        lines = [self.description] if self.description else []
        if self.examples:
            lines.append("")
            lines.append("Examples:")
            lines.extend(f"  {example}" for example in self.examples)
        return "\n".join(lines)
