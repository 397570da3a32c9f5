# topmark:header:start
#
#   project      : SourceMark
#   file         : main.py
#   file_relpath : src/sourcemark/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SourceMark CLI entry point.

Group-level options (verbosity, color) are resolved once and stored in
``ctx.obj`` for the subcommands, together with the program-output console.
"""

from __future__ import annotations

import click

from sourcemark.cli.commands.annotate import annotate_command
from sourcemark.cli.commands.config import config_command
from sourcemark.cli.commands.version import version_command
from sourcemark.cli.console import ClickConsole
from sourcemark.cli.options import (
    CONTEXT_SETTINGS,
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from sourcemark.config.logging import resolve_env_log_level, setup_logging


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (logging, color, console) on the Click context.

    ``SOURCEMARK_LOG_LEVEL`` wins over ``-v``/``-q`` when set.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    level: int = resolve_verbosity(verbose, quiet)
    level_env: int | None = resolve_env_log_level()
    ctx.obj["log_level"] = level_env if level_env is not None else level
    ctx.obj["quiet"] = quiet
    setup_logging(level=ctx.obj["log_level"])

    effective_color_mode = ColorMode.NEVER if no_color else (color_mode or ColorMode.AUTO)
    enable_color: bool = resolve_color_mode(cli_mode=effective_color_mode)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color

    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    context_settings=CONTEXT_SETTINGS,
    invoke_without_command=True,
    help="SourceMark: tag HTML in templates with their source file and line.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Entry point for the SourceMark CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    if ctx.invoked_subcommand is None:
        console: ClickConsole = ctx.obj["console"]
        console.print("Hint: use 'sourcemark annotate [PATHS...]' to preview annotations.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(annotate_command)

cli.add_command(config_command)

cli.add_command(version_command)

if __name__ == "__main__":
    cli()
