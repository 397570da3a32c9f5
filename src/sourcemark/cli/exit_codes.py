# topmark:header:start
#
#   project      : SourceMark
#   file         : exit_codes.py
#   file_relpath : src/sourcemark/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the SourceMark CLI.

SourceMark follows the BSD `sysexits` convention where practical. The one
deliberate divergence is ``WOULD_CHANGE = 2``, returned by a dry run that found
templates to annotate; tests must check ``result.exception is None`` to tell it
apart from Click's own usage errors (which also exit with 2).
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the SourceMark CLI.

    Attributes:
        SUCCESS: Successful execution, nothing left to do.
        FAILURE: Generic failure.
        WOULD_CHANGE: Dry run: templates would change if ``--apply`` were set.
        USAGE_ERROR: Invalid flags/arguments (``EX_USAGE``).
        ENCODING_ERROR: A template is not valid UTF-8 (``EX_DATAERR``).
        FILE_NOT_FOUND: Input path does not exist (``EX_NOINPUT``).
        IO_ERROR: Error reading/writing a file (``EX_IOERR``).
        CONFIG_ERROR: Invalid configuration (``EX_CONFIG``).
    """

    SUCCESS = 0
    FAILURE = 1
    WOULD_CHANGE = 2  # deliberate divergence from sysexits; see module docstring

    USAGE_ERROR = 64  # EX_USAGE
    ENCODING_ERROR = 65  # EX_DATAERR
    FILE_NOT_FOUND = 66  # EX_NOINPUT
    IO_ERROR = 74  # EX_IOERR
    CONFIG_ERROR = 78  # EX_CONFIG
