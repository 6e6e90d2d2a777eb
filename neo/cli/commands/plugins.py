"""
Native Click implementation of the plugins command.

Usage: neo plugins [list|path]
"""

import click

from ..context import NeoContext


@click.group("plugins", invoke_without_command=True)
@click.pass_context
def plugins(ctx: click.Context) -> None:
    """Inspect installed plugins.

    Plugins live in <config dir>/plugins, one directory per plugin with
    a plugin.json manifest.

    \b
    Examples:

        neo plugins list     # Installed plugins and their state

        neo plugins path     # Where plugins are loaded from
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@plugins.command("list")
@click.pass_obj
def plugins_list_cmd(ctx: NeoContext) -> None:
    """List installed plugins."""
    runtime = ctx.runtime
    entries = runtime.plugin_registry.items()

    if not entries:
        click.echo("No plugins installed.")
        click.echo(f"Plugins directory: {runtime.plugin_loader.plugins_dir}")
        return

    rows = [
        [name, registered.plugin.version, registered.state.value, str(registered.path)]
        for name, registered in entries
    ]
    runtime.presenter.print_table(["Name", "Version", "State", "Path"], rows)


@plugins.command("path")
@click.pass_obj
def plugins_path_cmd(ctx: NeoContext) -> None:
    """Print the plugins directory."""
    click.echo(str(ctx.runtime.plugin_loader.plugins_dir))
