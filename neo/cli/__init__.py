"""
Click-based CLI for neo.

This module provides the main Click command group and serves as the
entry point for the neo CLI. Built-in commands are native Click
commands; commands contributed by plugins are looked up in the
runtime's CommandRegistry when click asks for them.

Usage:
    from neo.cli import cli
    cli()  # Invokes the CLI
"""

from __future__ import annotations

import click
from pydantic import ValidationError as PydanticValidationError

from .. import __version__
from .context import NeoContext, ensure_neo_context
from .dynamic import build_click_command


class NeoGroup(click.Group):
    """Group that falls back to plugin commands after the built-ins."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        # Eager options (--help, --version) exit before main() enters the
        # context, so close it here to run the runtime shutdown.
        try:
            return super().parse_args(ctx, args)
        except (click.exceptions.Exit, click.ClickException):
            ctx.close()
            raise

    def list_commands(self, ctx: click.Context) -> list[str]:
        builtin = super().list_commands(ctx)
        registry = ensure_neo_context(ctx).runtime.command_registry
        contributed = sorted(
            command.name
            for command in registry.get_all()
            if command.name not in self.commands and not getattr(command, "hidden", False)
        )
        return builtin + contributed

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        builtin = super().get_command(ctx, cmd_name)
        if builtin is not None:
            return builtin

        neo_ctx = ensure_neo_context(ctx)
        command = neo_ctx.runtime.command_registry.resolve_alias(cmd_name)
        if command is None:
            return None

        try:
            return build_click_command(command, neo_ctx)
        except PydanticValidationError as e:
            neo_ctx.runtime.logger.warning(
                'Command "%s" declares invalid parameters: %s', command.name, e
            )
            return None


@click.group(cls=NeoGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="neo")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """neo - extensible developer CLI

    Built-in commands manage plugins; installed plugins add their own
    commands below.

    \b
    Plugins:
        neo plugins list       Show installed plugins
        neo plugins path       Show the plugins directory
        neo commands           Show commands contributed by plugins
    """
    ensure_neo_context(ctx)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


def register_commands() -> None:
    """Register all built-in commands with the main group."""
    from .commands import BUILTIN_COMMANDS

    for cmd in BUILTIN_COMMANDS:
        cli.add_command(cmd)


# Register commands at module load time
register_commands()


# Export public API
__all__ = [
    "NeoContext",
    "NeoGroup",
    "cli",
    "register_commands",
]
