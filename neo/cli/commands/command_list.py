"""
Native Click implementation of the commands command.

Usage: neo commands [--all]
"""

import click

from ..context import NeoContext


@click.command("commands")
@click.option("--all", "show_all", is_flag=True, help="Include hidden commands.")
@click.pass_obj
def commands(ctx: NeoContext, show_all: bool) -> None:
    """List commands contributed by plugins."""
    registry = ctx.runtime.command_registry

    rows = []
    for command in registry.get_all():
        metadata = registry.get_metadata(command.name)
        hidden = getattr(command, "hidden", False) or (metadata is not None and metadata.hidden)
        if hidden and not show_all:
            continue
        group = metadata.group if metadata is not None and metadata.group else "-"
        rows.append([command.name, group, getattr(command, "description", "") or ""])

    if not rows:
        click.echo("No plugin commands registered.")
        return

    ctx.runtime.presenter.print_table(["Command", "Group", "Description"], rows)
