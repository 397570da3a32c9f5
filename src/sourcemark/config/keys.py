# topmark:header:start
#
#   project      : SourceMark
#   file         : keys.py
#   file_relpath : src/sourcemark/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for SourceMark configuration.

These constants describe the external configuration schema as it appears in
``sourcemark.toml`` and in ``[tool.sourcemark]`` inside ``pyproject.toml``.
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by SourceMark configuration."""

    # [tool.sourcemark] in pyproject.toml
    SECTION_TOOL: Final[str] = "tool"
    SECTION_SOURCEMARK: Final[str] = "sourcemark"

    # Top-level keys
    KEY_ROOT: Final[str] = "root"
    KEY_ENABLED: Final[str] = "enabled"
    KEY_ENVIRONMENT: Final[str] = "environment"
    KEY_DEVELOPMENT_ENVIRONMENTS: Final[str] = "development_environments"
    KEY_ATTRIBUTE_NAME: Final[str] = "attribute_name"
    KEY_PROJECT_ROOT: Final[str] = "project_root"

    # [scanner]
    SECTION_SCANNER: Final[str] = "scanner"

    KEY_DIRECTIVE_SYNTAX: Final[str] = "directive_syntax"
    KEY_DIRECTIVE_DELIMITERS: Final[str] = "directive_delimiters"
    KEY_UNTERMINATED_TAGS: Final[str] = "unterminated_tags"
    KEY_MAX_TAG_LINES: Final[str] = "max_tag_lines"

    # [files] (CLI only)
    SECTION_FILES: Final[str] = "files"

    KEY_INCLUDE_PATTERNS: Final[str] = "include_patterns"
    KEY_EXCLUDE_PATTERNS: Final[str] = "exclude_patterns"
