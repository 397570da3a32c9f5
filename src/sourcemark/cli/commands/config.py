# topmark:header:start
#
#   project      : SourceMark
#   file         : config.py
#   file_relpath : src/sourcemark/cli/commands/config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SourceMark `config` command group.

Subcommands:
    dump: print the effective configuration (defaults, config files,
        ``SOURCEMARK_*`` variables and CLI overrides merged) as TOML.
    defaults: print the packaged defaults as TOML.

Both write plain TOML to stdout so the output can be redirected into a
``sourcemark.toml`` (or, with ``--pyproject``, pasted into ``pyproject.toml``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sourcemark.cli.config_resolver import resolve_config
from sourcemark.cli.options import CONTEXT_SETTINGS, common_config_options
from sourcemark.config.loaders import load_defaults_dict, nest_under_tool_section, to_toml
from sourcemark.config.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from sourcemark.cli.console import ClickConsole
    from sourcemark.config import Config
    from sourcemark.config.logging import SourcemarkLogger
    from sourcemark.config.types import TomlTable

logger: SourcemarkLogger = get_logger(__name__)


def _emit_toml(console: ClickConsole, table: TomlTable, *, pyproject: bool) -> None:
    if pyproject:
        table = nest_under_tool_section(table)
    console.write(to_toml(table))


@click.group(
    name="config",
    help="Inspect SourceMark configuration.",
    context_settings=CONTEXT_SETTINGS,
)
def config_command() -> None:
    """Group for configuration subcommands."""


@config_command.command(
    name="dump",
    help="Dump the effective (merged) configuration as TOML.",
    context_settings=CONTEXT_SETTINGS,
)
@common_config_options
@click.option(
    "--pyproject",
    is_flag=True,
    help="Nest the output under [tool.sourcemark] for pyproject.toml.",
)
def config_dump_command(
    *,
    no_config: bool,
    config_paths: tuple[Path, ...],
    pyproject: bool,
) -> None:
    """Dump the final merged configuration as TOML.

    Args:
        no_config (bool): If True, skip discovery of config files.
        config_paths (tuple[Path, ...]): Additional configuration files to merge.
        pyproject (bool): Nest the output under ``[tool.sourcemark]``.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ClickConsole = ctx.obj["console"]

    config: Config = resolve_config(no_config=no_config, config_paths=config_paths)
    for source in config.config_files:
        logger.info("Merged config source: %s", source)
    _emit_toml(console, config.to_toml_dict(), pyproject=pyproject)


@config_command.command(
    name="defaults",
    help="Show the packaged default configuration as TOML.",
    context_settings=CONTEXT_SETTINGS,
)
@click.option(
    "--pyproject",
    is_flag=True,
    help="Nest the output under [tool.sourcemark] for pyproject.toml.",
)
def config_defaults_command(*, pyproject: bool) -> None:
    """Print the packaged defaults as TOML.

    Args:
        pyproject (bool): Nest the output under ``[tool.sourcemark]``.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ClickConsole = ctx.obj["console"]
    _emit_toml(console, load_defaults_dict(), pyproject=pyproject)
