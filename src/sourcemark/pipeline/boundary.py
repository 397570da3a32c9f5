# topmark:header:start
#
#   project      : SourceMark
#   file         : boundary.py
#   file_relpath : src/sourcemark/pipeline/boundary.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Start-tag end detection.

A start tag ends at the first ``>`` that is not inside a quoted attribute value.
The search keeps its own quote state, independent of the outer scanner state,
and carries it across lines so a tag spanning several lines is handled by
feeding each line in turn to the same `TagBoundary`.

Quoting rules:
    - ``"`` and ``'`` open a quoted value; only the same character closes it.
    - A quote preceded by a single backslash is treated as escaped. This is a
      heuristic: ``\\\\"`` (escaped backslash, then a real closing quote) is
      still read as an escaped quote.

Directive regions embedded in a tag (``<div <%= attrs %>>``,
``<li class="{{ cls }}">``) are skipped whole, so a ``>`` inside them does not
end the tag.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from sourcemark.config.logging import get_logger

if TYPE_CHECKING:
    from sourcemark.config.logging import SourcemarkLogger
    from sourcemark.config.types import DelimiterPair

logger: SourcemarkLogger = get_logger(__name__)

QUOTE_CHARS: Final[frozenset[str]] = frozenset({'"', "'"})


def match_directive_opener(
    text: str, pos: int, delimiters: tuple[DelimiterPair, ...]
) -> DelimiterPair | None:
    """Return the delimiter pair whose opener starts at ``text[pos]``, if any.

    Args:
        text (str): Text being scanned.
        pos (int): Cursor position.
        delimiters (tuple[DelimiterPair, ...]): Candidate ``(open, close)`` pairs.

    Returns:
        DelimiterPair | None: The matching pair, or ``None``.
    """
    for pair in delimiters:
        if text.startswith(pair[0], pos):
            return pair
    return None


def is_escaped(text: str, pos: int) -> bool:
    """Return True if the character at ``pos`` is preceded by a backslash."""
    return pos > 0 and text[pos - 1] == "\\"


class TagBoundary:
    """Incremental search for the closing ``>`` of one start tag.

    Attributes:
        delimiters (tuple[DelimiterPair, ...]): Directive delimiter pairs skipped
            while searching.
        quote_char (str | None): The open quote character, if inside a quoted value.
        directive_close (str | None): The closer being waited for, if inside a
            directive region embedded in the tag.
    """

    def __init__(self, delimiters: tuple[DelimiterPair, ...] = ()) -> None:
        self.delimiters = delimiters
        self.quote_char: str | None = None
        self.directive_close: str | None = None

    def find_end(self, text: str, start: int = 0) -> int | None:
        """Return the index of the tag's closing ``>`` in ``text``, or None.

        When ``None`` is returned the quote/directive state reflects the end of
        ``text`` and the search can continue with the next line.

        Args:
            text (str): Text to search (usually one source line).
            start (int): Index to start from (the ``<`` of the tag on its first line).

        Returns:
            int | None: Index of the terminating ``>``, or ``None`` if the tag does
                not end in ``text``.
        """
        i: int = start
        n: int = len(text)
        while i < n:
            if self.directive_close is not None:
                close: int = text.find(self.directive_close, i)
                if close == -1:
                    return None
                i = close + len(self.directive_close)
                self.directive_close = None
                continue

            pair: DelimiterPair | None = match_directive_opener(text, i, self.delimiters)
            if pair is not None:
                self.directive_close = pair[1]
                i += len(pair[0])
                continue

            char: str = text[i]
            if char in QUOTE_CHARS and not is_escaped(text, i):
                if self.quote_char is None:
                    self.quote_char = char
                elif char == self.quote_char:
                    self.quote_char = None
            elif char == ">" and self.quote_char is None:
                return i
            i += 1

        logger.trace("tag continues past end of text; quote=%r", self.quote_char)
        return None
