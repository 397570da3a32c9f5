# topmark:header:start
#
#   project      : SourceMark
#   file         : diff.py
#   file_relpath : src/sourcemark/utils/diff.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unified diffs between original and annotated template text.

`make_patch` produces the plain unified diff; `render_patch` colorizes it
for terminal display.
"""

from __future__ import annotations

import difflib
from typing import TYPE_CHECKING

from yachalk import chalk

if TYPE_CHECKING:
    from collections.abc import Sequence


def make_patch(original: str, updated: str, name: str) -> list[str]:
    """Return a unified diff of ``original`` → ``updated`` as a list of lines.

    Args:
        original (str): Text before annotation.
        updated (str): Text after annotation.
        name (str): Display name used in the ``---``/``+++`` headers.

    Returns:
        list[str]: Diff lines (each ending with a newline), empty when equal.
    """
    return list(
        difflib.unified_diff(
            original.splitlines(keepends=True),
            updated.splitlines(keepends=True),
            fromfile=f"{name} (original)",
            tofile=f"{name} (annotated)",
        )
    )


def render_patch(patch: Sequence[str] | str, show_line_numbers: bool = False) -> str:
    """Render a colorized preview of a unified diff.

    Args:
        patch: A unified diff as either a sequence of lines or a single string.
        show_line_numbers: Whether to prefix output with line numbers.

    Returns:
        The formatted, colorized diff preview.
    """
    if isinstance(patch, str):
        lines: list[str] = patch.splitlines(keepends=False)
    else:
        lines = [line.rstrip("\n") for line in patch]

    def process_line(line: str) -> str:
        # Show control characters explicitly.
        content = line.replace("\r", "\\r")
        match line[:1]:
            case "-":
                return chalk.bold.red(content)
            case "+":
                return chalk.bold.green(content)
            case "@":
                return chalk.cyan(content)
            case _:
                return chalk.white(content)

    if show_line_numbers:
        return "".join(f"{i:04d}|{process_line(line)}\n" for i, line in enumerate(lines, 1))
    return "".join(f"{process_line(line)}\n" for line in lines)
