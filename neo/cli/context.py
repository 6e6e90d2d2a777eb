"""
Click context extension for neo CLI.

Provides NeoContext dataclass that holds the bootstrapped runtime
passed through the Click command chain via ctx.obj.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

import click

from ..core.bootstrap import Runtime, bootstrap


@dataclass
class NeoContext:
    """Extended context passed through Click command chain.

    Attributes:
        runtime: Services of this process (container, registries, plugins)
        verbose: Whether --verbose was given
        is_interactive: Whether stdin is a TTY (for prompts)
        exit_code: Reported to plugin on_exit hooks at shutdown
    """

    runtime: Runtime
    verbose: bool = False
    is_interactive: bool = False
    exit_code: int = 0

    @classmethod
    def create(cls, verbose: bool = False, config_dir: Path | None = None) -> NeoContext:
        """Bootstrap the runtime and load plugins.

        Args:
            verbose: Force debug logging to the console
            config_dir: Configuration directory override

        Returns:
            Configured NeoContext instance
        """
        runtime = bootstrap(config_dir, verbose=verbose)
        runtime.load_plugins()
        return cls(
            runtime=runtime,
            verbose=verbose,
            is_interactive=sys.stdin.isatty(),
        )

    def close(self) -> None:
        self.runtime.shutdown(self.exit_code)


def ensure_neo_context(ctx: click.Context) -> NeoContext:
    """Return the NeoContext on the root context, creating it on first use.

    Subcommand lookup runs before the group callback, so whichever comes
    first bootstraps the runtime. Shutdown is tied to the root context.
    """
    root = ctx.find_root()
    if isinstance(root.obj, NeoContext):
        return root.obj

    neo_ctx = NeoContext.create(verbose=bool(root.params.get("verbose")))
    root.obj = neo_ctx
    root.call_on_close(neo_ctx.close)
    return neo_ctx
