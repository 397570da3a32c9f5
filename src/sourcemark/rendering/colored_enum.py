# topmark:header:start
#
#   project      : SourceMark
#   file         : colored_enum.py
#   file_relpath : src/sourcemark/rendering/colored_enum.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Status enums that know how they are colored on a terminal.

Tag outcomes (`sourcemark.pipeline.outcomes.TagOutcome`) and per-file results
of ``sourcemark annotate`` are both declared as ``(label, chalk style)`` pairs.
The label stays the member's plain ``str`` value, so outcomes can be used as
dict keys, compared with strings and logged; the style is only applied when
the CLI renders a status line with color enabled.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class Colorizer(Protocol):
    """Anything called like a yachalk style: ``style("text") -> str``."""

    def __call__(self, *args: object, sep: str = " ") -> str: ...


class ColoredStrEnum(str, Enum):
    """String enum whose members carry a colorizer next to their label.

    Members are declared as ``NAME = ("label", chalk.style)``.
    """

    _value_: str
    _color: Colorizer

    def __new__(cls, label: str, color: Colorizer) -> ColoredStrEnum:
        obj: ColoredStrEnum = str.__new__(cls, label)
        obj._value_ = label
        obj._color = color
        return obj

    @property
    def value(self) -> str:
        """The plain label."""
        return self._value_

    @property
    def color(self) -> Colorizer:
        """The member's colorizer."""
        return self._color

    def paint(self, text: str | None = None, *, enabled: bool = True) -> str:
        """Return ``text`` (the label by default) styled with this member's color.

        Args:
            text (str | None): Text to style; the member's label when None.
            enabled (bool): When False the text is returned without escapes.

        Returns:
            str: The rendered text.
        """
        plain: str = self._value_ if text is None else text
        return self._color(plain) if enabled else plain
