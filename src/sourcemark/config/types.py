# topmark:header:start
#
#   project      : SourceMark
#   file         : types.py
#   file_relpath : src/sourcemark/config/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration value types for SourceMark.

The enums here are ``str``-valued so they round-trip through TOML unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# A parsed TOML table in plain-Python form (see `sourcemark.config.loaders`).
TomlTable = dict[str, Any]

# A directive opener and its closer, e.g. ``("<%", "%>")``.
DelimiterPair = tuple[str, str]


class DirectiveSyntax(str, Enum):
    """Embedded script-directive flavour of the templates being annotated.

    Members:
        ERB: ``<% ... %>`` (also covers ``<%= %>`` and ``<%# %>``).
        JINJA: ``{% ... %}``, ``{{ ... }}`` and ``{# ... #}`` (Jinja2 and Django).
        NONE: plain HTML, no directive regions.
    """

    ERB = "erb"
    JINJA = "jinja"
    NONE = "none"

    @property
    def delimiters(self) -> tuple[DelimiterPair, ...]:
        """Return the directive delimiter pairs for this syntax."""
        return _SYNTAX_DELIMITERS[self]


_SYNTAX_DELIMITERS: dict[DirectiveSyntax, tuple[DelimiterPair, ...]] = {
    DirectiveSyntax.ERB: (("<%", "%>"),),
    DirectiveSyntax.JINJA: (("{%", "%}"), ("{{", "}}"), ("{#", "#}")),
    DirectiveSyntax.NONE: (),
}


class UnterminatedTagPolicy(str, Enum):
    """What to do with a start tag still open when the input ends.

    Members:
        PASSTHROUGH: Emit the buffered tag text verbatim, uninstrumented.
        DROP: Discard the buffered tag text from the output.
    """

    PASSTHROUGH = "passthrough"
    DROP = "drop"
