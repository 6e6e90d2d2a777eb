"""
Click adapters for commands held in the runtime's CommandRegistry.

Plugin commands are not click commands; they are turned into click
commands on lookup so that click handles parsing, help and usage errors.
"""

from __future__ import annotations

from typing import Any

import click

from ..core.error_handler import handle_command_result_sync
from ..core.interfaces.command import ICommand
from ..core.models.command import CommandArgument, CommandOption
from .context import NeoContext


def _build_option(option: CommandOption) -> click.Option:
    default = option.default
    if option.is_flag and default is None:
        default = False
    return click.Option(
        option.declarations,
        help=option.description or None,
        default=default,
        required=option.required,
        is_flag=option.is_flag,
        multiple=option.multiple,
        show_default=option.default is not None and not option.is_flag,
    )


def _build_argument(argument: CommandArgument) -> click.Argument:
    if argument.variadic:
        return click.Argument([argument.name], nargs=-1, required=argument.required)
    return click.Argument(
        [argument.name],
        required=argument.required,
        default=None if argument.required else argument.default,
    )


def build_click_command(command: ICommand, neo_ctx: NeoContext) -> click.Command:
    """Wrap a registry command in a click.Command that dispatches through the runtime."""
    options = [_build_option(CommandOption.model_validate(o)) for o in _declared(command, "options")]
    arguments = [
        _build_argument(CommandArgument.model_validate(a)) for a in _declared(command, "arguments")
    ]

    def callback(**params: Any) -> None:
        args: list[Any] = []
        for param in arguments:
            value = params.pop(param.name, None)
            if value is None:
                continue
            if isinstance(value, tuple):
                args.extend(value)
            else:
                args.append(value)
        dispatch(neo_ctx, command.name, params, args)

    examples = _declared(command, "examples")
    epilog = "\b\nExamples:\n" + "\n".join(f"  {e}" for e in examples) if examples else None

    return click.Command(
        command.name,
        params=[*options, *arguments],
        callback=callback,
        help=getattr(command, "description", None) or None,
        epilog=epilog,
        hidden=bool(getattr(command, "hidden", False)),
    )


def _declared(command: ICommand, attribute: str) -> list[Any]:
    """Optional list attributes of duck-typed plugin commands."""
    return list(getattr(command, attribute, None) or [])


def dispatch(
    neo_ctx: NeoContext,
    command_name: str,
    options: dict[str, Any],
    args: list[Any],
) -> None:
    """
    Run a registry command and turn its outcome into process status.

    A failed Result exits with status 1; a raised exception goes through
    the error handler, which exits unless a recovery strategy applies.
    """
    runtime = neo_ctx.runtime
    try:
        result = runtime.run_command(command_name, options, args)
    except Exception as e:
        try:
            runtime.error_handler.handle(e)
        except SystemExit as exit_:
            neo_ctx.exit_code = exit_.code if isinstance(exit_.code, int) else 1
            raise
        return

    if not result.success:
        neo_ctx.exit_code = 1
    handle_command_result_sync(result, runtime.presenter)
