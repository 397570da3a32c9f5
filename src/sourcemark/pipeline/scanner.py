# topmark:header:start
#
#   project      : SourceMark
#   file         : scanner.py
#   file_relpath : src/sourcemark/pipeline/scanner.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Template scanner: a tag-aware state machine over template source text.

The scanner makes a single forward pass, line by line and character by
character, and rebuilds the text as it goes:

- ``PLAIN → IN_DIRECTIVE`` on a directive opener (``<%``, ``{{``, ...), back on
  the matching closer. Directive text is copied verbatim; it may contain ``<``
  and ``>`` that are not markup.
- ``PLAIN → IN_COMMENT`` on ``<!--``, back on ``-->``. Copied verbatim.
- In ``PLAIN``, ``<`` followed by an ASCII letter starts a tag. When the tag
  ends on the same line it goes through the injector with the current line's
  locator. Otherwise it is buffered (`PendingTag`) until the line holding its
  ``>``; the finished tag keeps the locator of the line it started on. No
  tags are instrumented on the rest of that closing line, but directive and
  comment openers there still change the state.
- A tag buffering more than ``max_tag_lines`` lines is flushed as is; its
  remaining lines are copied through unchanged up to its real ``>``.

Nothing ever raises: every character has a defined transition, and an
unterminated tag is handled by `UnterminatedTagPolicy` at end of input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sourcemark.config.logging import get_logger
from sourcemark.config.types import UnterminatedTagPolicy
from sourcemark.constants import HTML_COMMENT_CLOSE, HTML_COMMENT_OPEN
from sourcemark.pipeline.boundary import TagBoundary, match_directive_opener
from sourcemark.pipeline.injector import classify_tag, inject_source_attribute
from sourcemark.pipeline.outcomes import ScanReport, TagOutcome
from sourcemark.pipeline.state import PendingTag, ScanState, iter_source_lines, make_locator

if TYPE_CHECKING:
    from sourcemark.config.logging import SourcemarkLogger
    from sourcemark.config.types import DelimiterPair

logger: SourcemarkLogger = get_logger(__name__)


def _starts_tag(line: str, pos: int) -> bool:
    """Return True if an HTML start tag opens at ``line[pos]``."""
    if line[pos] != "<" or pos + 1 >= len(line):
        return False
    nxt: str = line[pos + 1]
    return nxt.isascii() and nxt.isalpha()


class TemplateScanner:
    """Walk template source and instrument every qualifying start tag.

    A scanner holds only its settings; all per-document state lives in locals
    of `scan`, so one instance may be reused and shared freely.

    Args:
        template_identifier (str): Identifier used in locators (already normalized).
        attribute_name (str): Name of the injected attribute.
        delimiters (tuple[DelimiterPair, ...]): Directive ``(open, close)`` pairs.
        unterminated_tags (UnterminatedTagPolicy): What to emit for a tag still open
            at end of input.
        max_tag_lines (int): Maximum lines buffered for one tag before it is flushed
            uninstrumented (``0`` = unbounded).
    """

    def __init__(
        self,
        *,
        template_identifier: str,
        attribute_name: str,
        delimiters: tuple[DelimiterPair, ...] = (),
        unterminated_tags: UnterminatedTagPolicy = UnterminatedTagPolicy.PASSTHROUGH,
        max_tag_lines: int = 0,
    ) -> None:
        self.template_identifier = template_identifier
        self.attribute_name = attribute_name
        self.delimiters = delimiters
        self.unterminated_tags = unterminated_tags
        self.max_tag_lines = max_tag_lines

    def _emit_tag(self, tag_text: str, line_number: int, report: ScanReport) -> str:
        outcome: TagOutcome = classify_tag(tag_text, self.attribute_name)
        report.tag_counts[outcome] += 1
        locator: str = make_locator(self.template_identifier, line_number)
        logger.trace("tag at %s: %s", locator, outcome.value)
        return inject_source_attribute(tag_text, locator, self.attribute_name)

    def scan(self, source: str) -> ScanReport:
        """Instrument ``source`` and return the rebuilt text with tag statistics.

        Args:
            source (str): Template source text.

        Returns:
            ScanReport: The transformed text and per-tag outcomes.
        """
        report = ScanReport(text="")
        out: list[str] = []
        state: ScanState = ScanState.PLAIN
        closer: str = ""
        pending: PendingTag | None = None
        # Boundary of an overflowed tag whose tail is still being copied through
        overflow: TagBoundary | None = None

        for line_number, line in enumerate(iter_source_lines(source), start=1):
            i: int = 0
            n: int = len(line)
            find_tags: bool = True
            end: int | None

            if overflow is not None:
                end = overflow.find_end(line)
                if end is None:
                    out.append(line)
                    continue
                out.append(line[: end + 1])
                overflow = None
                i, find_tags = end + 1, False

            elif pending is not None:
                end = pending.boundary.find_end(line)
                if end is None:
                    pending.append(line)
                    if self.max_tag_lines and pending.line_count > self.max_tag_lines:
                        logger.debug(
                            "tag at line %d exceeds %d lines; flushing uninstrumented",
                            pending.start_line,
                            self.max_tag_lines,
                        )
                        report.overflowed.append(pending.start_line)
                        out.append(pending.text)
                        overflow = pending.boundary
                        pending = None
                    continue
                pending.append(line[: end + 1])
                out.append(self._emit_tag(pending.text, pending.start_line, report))
                pending = None
                i, find_tags = end + 1, False

            # With find_tags off (rest of a multi-line tag's closing line) only
            # directive and comment boundaries are tracked.
            while i < n:
                if state is ScanState.IN_DIRECTIVE or state is ScanState.IN_COMMENT:
                    close: int = line.find(closer, i)
                    if close == -1:
                        out.append(line[i:])
                        break
                    out.append(line[i : close + len(closer)])
                    i = close + len(closer)
                    state = ScanState.PLAIN
                    continue

                pair: DelimiterPair | None = match_directive_opener(line, i, self.delimiters)
                if pair is not None:
                    out.append(pair[0])
                    i += len(pair[0])
                    state, closer = ScanState.IN_DIRECTIVE, pair[1]
                    continue

                if line.startswith(HTML_COMMENT_OPEN, i):
                    out.append(HTML_COMMENT_OPEN)
                    i += len(HTML_COMMENT_OPEN)
                    state, closer = ScanState.IN_COMMENT, HTML_COMMENT_CLOSE
                    continue

                if find_tags and _starts_tag(line, i):
                    boundary = TagBoundary(self.delimiters)
                    tag_end: int | None = boundary.find_end(line, i)
                    if tag_end is not None:
                        out.append(self._emit_tag(line[i : tag_end + 1], line_number, report))
                        i = tag_end + 1
                        continue
                    pending = PendingTag(start_line=line_number, boundary=boundary)
                    pending.append(line[i:])
                    logger.trace("tag at line %d continues on next line", line_number)
                    break

                out.append(line[i])
                i += 1

        if pending is not None:
            report.unterminated = pending.start_line
            if self.unterminated_tags is UnterminatedTagPolicy.PASSTHROUGH:
                out.append(pending.text)

        report.text = "".join(out)
        return report
