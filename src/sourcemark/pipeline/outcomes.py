# topmark:header:start
#
#   project      : SourceMark
#   file         : outcomes.py
#   file_relpath : src/sourcemark/pipeline/outcomes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Outcomes reported by the annotation pipeline.

`TagOutcome` classifies what happened to a single start tag; `ScanReport` is
the result of one annotation pass over a document.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from yachalk import chalk

from sourcemark.rendering.colored_enum import ColoredStrEnum


class TagOutcome(ColoredStrEnum):
    """What the injector did with one start tag."""

    INSTRUMENTED = ("instrumented", chalk.green)
    ALREADY_MARKED = ("already marked", chalk.gray)
    VOID = ("void element", chalk.gray)
    MALFORMED = ("not a start tag", chalk.yellow)


@dataclass
class ScanReport:
    """Result of annotating one document.

    Attributes:
        text (str): The transformed source text.
        active (bool): Whether instrumentation ran (False when gated off).
        tag_counts (Counter[TagOutcome]): Number of tags per outcome.
        unterminated (int | None): Start line of a tag still open at end of input.
        overflowed (list[int]): Start lines of multi-line tags flushed uninstrumented
            because they exceeded the buffered-line cap.
    """

    text: str
    active: bool = True
    tag_counts: Counter[TagOutcome] = field(default_factory=lambda: Counter[TagOutcome]())
    unterminated: int | None = None
    overflowed: list[int] = field(default_factory=lambda: [])

    @property
    def instrumented(self) -> int:
        """Number of tags that received the attribute."""
        return self.tag_counts[TagOutcome.INSTRUMENTED]

    @property
    def is_lossy(self) -> bool:
        """Whether some tag could not be instrumented because it never closed."""
        return self.unterminated is not None or bool(self.overflowed)
