# topmark:header:start
#
#   project      : SourceMark
#   file         : version.py
#   file_relpath : src/sourcemark/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SourceMark `version` command.

Prints the current SourceMark version as installed in the active Python environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sourcemark.cli.options import CONTEXT_SETTINGS
from sourcemark.constants import SOURCEMARK_VERSION

if TYPE_CHECKING:
    from sourcemark.cli.console import ClickConsole


@click.command(
    name="version",
    help="Show the current version of SourceMark.",
    context_settings=CONTEXT_SETTINGS,
)
def version_command() -> None:
    """Show the current version of SourceMark."""
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ClickConsole = ctx.obj["console"]
    console.print(SOURCEMARK_VERSION)
