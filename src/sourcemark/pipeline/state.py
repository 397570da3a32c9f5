# topmark:header:start
#
#   project      : SourceMark
#   file         : state.py
#   file_relpath : src/sourcemark/pipeline/state.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Scanner state and per-pass data.

Everything here is created fresh for each annotation call and discarded at the
end of it; nothing is shared between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sourcemark.pipeline.boundary import TagBoundary


class ScanState(Enum):
    """Where the scanner cursor currently is.

    The states are mutually exclusive and persist across character and line
    boundaries within one pass.
    """

    PLAIN = "plain"
    IN_DIRECTIVE = "in_directive"
    IN_COMMENT = "in_comment"


def make_locator(template_identifier: str, line_number: int) -> str:
    """Return the ``identifier:line`` locator for a tag (1-based line)."""
    return f"{template_identifier}:{line_number}"


def iter_source_lines(text: str) -> Iterator[str]:
    r"""Yield the lines of ``text`` with their line endings attached.

    Only ``\n`` ends a line (``\r\n`` stays together on the same line). Unlike
    `str.splitlines`, form feeds and Unicode line separators do not start a new
    line, so line numbers agree with editors and template engines.

    Args:
        text (str): Source text.

    Yields:
        str: Successive lines, each ending in ``\n`` except possibly the last.
    """
    start: int = 0
    n: int = len(text)
    while start < n:
        end: int = text.find("\n", start)
        if end == -1:
            yield text[start:]
            return
        yield text[start : end + 1]
        start = end + 1


@dataclass
class PendingTag:
    """Multi-line tag buffer.

    Holds a start tag whose closing ``>`` has not been seen yet.

    Attributes:
        start_line (int): 1-based line where the tag began; used for its locator.
        boundary (TagBoundary): Quote/directive state of the tag-end search, carried
            from one line to the next.
        parts (list[str]): Buffered text, line endings included.
    """

    start_line: int
    boundary: TagBoundary
    parts: list[str] = field(default_factory=lambda: [])

    def append(self, text: str) -> None:
        """Add another chunk of tag text."""
        self.parts.append(text)

    @property
    def line_count(self) -> int:
        """Number of source lines buffered so far."""
        return len(self.parts)

    @property
    def text(self) -> str:
        """The buffered tag text."""
        return "".join(self.parts)
