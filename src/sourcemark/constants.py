# topmark:header:start
#
#   project      : SourceMark
#   file         : constants.py
#   file_relpath : src/sourcemark/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SourceMark Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version
from typing import Final

SOURCEMARK_VERSION: str = get_version("sourcemark")

# Config file names, in same-directory precedence order (last wins).
PYPROJECT_TOML_NAME: Final[str] = "pyproject.toml"
SOURCEMARK_TOML_NAME: Final[str] = "sourcemark.toml"

# Environment variables consulted while building a Config.
ENV_ENABLED: Final[str] = "SOURCEMARK_ENABLED"
ENV_ENVIRONMENT: Final[str] = "SOURCEMARK_ENV"
ENV_ATTRIBUTE: Final[str] = "SOURCEMARK_ATTRIBUTE"
ENV_LOG_LEVEL: Final[str] = "SOURCEMARK_LOG_LEVEL"

DEFAULT_ATTRIBUTE_NAME: Final[str] = "data-source-id"
DEFAULT_ENVIRONMENT: Final[str] = "production"
DEFAULT_DEVELOPMENT_ENVIRONMENTS: Final[tuple[str, ...]] = ("development",)
DEFAULT_MAX_TAG_LINES: Final[int] = 256

HTML_COMMENT_OPEN: Final[str] = "<!--"
HTML_COMMENT_CLOSE: Final[str] = "-->"

# Elements that never take children and have no end tag. They are left alone.
VOID_ELEMENTS: Final[frozenset[str]] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Template files picked up when the CLI walks a directory.
DEFAULT_TEMPLATE_GLOBS: Final[tuple[str, ...]] = (
    "*.html",
    "*.htm",
    "*.erb",
    "*.j2",
    "*.jinja",
    "*.jinja2",
)
