# topmark:header:start
#
#   project      : SourceMark
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test helpers for running SourceMark through Click's test runner.

Tests that touch the filesystem use the ``isolation`` fixture (see
``tests/conftest.py``), which makes a fresh project directory the current
directory, so relative PATHS and the default project root both resolve there.
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Any

from click.testing import CliRunner, Result

from sourcemark.cli.exit_codes import ExitCode
from sourcemark.cli.main import cli

if TYPE_CHECKING:
    from collections.abc import Sequence


def run_cli(
    argv: Sequence[str],
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI with color disabled.

    Args:
        argv (Sequence[str]): CLI argument vector, e.g. ``["annotate", "views"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input.

    Returns:
        Result: The `click.testing.Result` produced by `CliRunner.invoke`.
    """
    runner = CliRunner()
    return runner.invoke(cli, ["--no-color", *argv], input=input_text)


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0)."""
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_WOULD_CHANGE(result: Result) -> None:
    """Assert that the command exited with WOULD_CHANGE (code 2)."""
    assert result.exit_code == ExitCode.WOULD_CHANGE, result.output


def assert_exit(result: Result, code: ExitCode) -> None:
    """Assert that the command exited with ``code``."""
    assert result.exit_code == code, result.output
