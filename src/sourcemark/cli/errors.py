# topmark:header:start
#
#   project      : SourceMark
#   file         : errors.py
#   file_relpath : src/sourcemark/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the SourceMark CLI.

Raise these from commands to exit with a standardized message and exit code.
They print through the project console when one is attached to the Click
context, and fall back to Click's default display otherwise.
"""

from __future__ import annotations

from typing import IO, Any

import click

from sourcemark.cli.exit_codes import ExitCode


class SourcemarkError(click.ClickException):
    """Base class for all SourceMark CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorized later by `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available."""
        ctx = click.get_current_context(silent=True)
        if ctx is not None and isinstance(ctx.obj, dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(console.styled(self.format_message(), fg="bright_red"))
                return
        super().show(file)


class SourcemarkUsageError(SourcemarkError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class SourcemarkConfigError(SourcemarkError):
    """Error for configuration errors (invalid values)."""

    exit_code = ExitCode.CONFIG_ERROR


class SourcemarkFileNotFoundError(SourcemarkError):
    """Error when an input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class SourcemarkIOError(SourcemarkError):
    """Error for I/O errors reading/writing templates."""

    exit_code = ExitCode.IO_ERROR


class SourcemarkEncodingError(SourcemarkError):
    """Error for templates that are not valid UTF-8."""

    exit_code = ExitCode.ENCODING_ERROR
