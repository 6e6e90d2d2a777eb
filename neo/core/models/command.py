"""
Command declaration models.

Commands describe their parameters with these models; the CLI turns
them into click options and arguments.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from .base import ImmutableModel


class CommandOption(ImmutableModel):
    """A named option, e.g. ``CommandOption(flags="-f, --force", is_flag=True)``."""

    flags: str
    description: str = ""
    default: Any = None
    required: bool = False
    is_flag: bool = False
    multiple: bool = False

    @field_validator("flags")
    @classmethod
    def ensure_long_or_short(cls, v: str) -> str:
        """Every declared flag must start with a dash."""
        parts = [p.strip() for p in v.split(",") if p.strip()]
        if not parts or not all(p.startswith("-") for p in parts):
            raise ValueError(f"Invalid option flags: {v!r}")
        return v

    @property
    def declarations(self) -> list[str]:
        """Flags as a list, e.g. ['-n', '--name'] for '-n, --name <name>'."""
        return [p.split()[0] for p in self.flags.split(",") if p.strip()]


class CommandArgument(ImmutableModel):
    """A positional argument."""

    name: str
    description: str = ""
    required: bool = True
    default: Any = None
    variadic: bool = False


class CommandMetadata(ImmutableModel):
    """Registration-time metadata for a command."""

    name: str | None = None
    description: str | None = None
    group: str | None = None
    aliases: list[str] = Field(default_factory=list)
    hidden: bool = False
    priority: int = 0
    experimental: bool = False
    deprecated: bool = False
    deprecation_message: str | None = None
