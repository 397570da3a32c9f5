# topmark:header:start
#
#   project      : SourceMark
#   file         : loaders.py
#   file_relpath : src/sourcemark/config/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load and render TOML configuration sources.

This module provides the I/O helpers for SourceMark configuration:
- the runtime defaults (defined in code, no I/O),
- on-disk TOML files (`sourcemark.toml` / `pyproject.toml`),
- serializing a configuration mapping back to TOML text.

Parsing is done with `tomlkit` and returned as plain `dict` structures.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from sourcemark.config.keys import Toml
from sourcemark.config.logging import get_logger
from sourcemark.config.types import DirectiveSyntax, UnterminatedTagPolicy
from sourcemark.constants import (
    DEFAULT_ATTRIBUTE_NAME,
    DEFAULT_DEVELOPMENT_ENVIRONMENTS,
    DEFAULT_ENVIRONMENT,
    DEFAULT_MAX_TAG_LINES,
    DEFAULT_TEMPLATE_GLOBS,
    PYPROJECT_TOML_NAME,
)

if TYPE_CHECKING:
    from pathlib import Path

    from sourcemark.config.logging import SourcemarkLogger
    from sourcemark.config.types import TomlTable

logger: SourcemarkLogger = get_logger(__name__)


def load_defaults_dict() -> TomlTable:
    """Return SourceMark's **runtime defaults** as a Python dict.

    This function performs no I/O. The returned value is a new dict so callers
    can mutate it safely.

    Returns:
        A TOML-table-compatible dict containing the runtime defaults.
    """
    return {
        Toml.KEY_ENABLED: True,
        Toml.KEY_ENVIRONMENT: DEFAULT_ENVIRONMENT,
        Toml.KEY_DEVELOPMENT_ENVIRONMENTS: list(DEFAULT_DEVELOPMENT_ENVIRONMENTS),
        Toml.KEY_ATTRIBUTE_NAME: DEFAULT_ATTRIBUTE_NAME,
        # NOTE: project_root defaults to unset (identifiers are used as given).
        Toml.SECTION_SCANNER: {
            Toml.KEY_DIRECTIVE_SYNTAX: DirectiveSyntax.ERB.value,
            Toml.KEY_UNTERMINATED_TAGS: UnterminatedTagPolicy.PASSTHROUGH.value,
            Toml.KEY_MAX_TAG_LINES: DEFAULT_MAX_TAG_LINES,
        },
        Toml.SECTION_FILES: {
            Toml.KEY_INCLUDE_PATTERNS: list(DEFAULT_TEMPLATE_GLOBS),
            Toml.KEY_EXCLUDE_PATTERNS: [],
        },
    }


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path (Path): Path to a TOML document (``sourcemark.toml`` or ``pyproject.toml``).

    Returns:
        TomlTable: The parsed TOML content.

    Notes:
        - Errors are logged and an empty dict is returned on failure.
        - Encoding is assumed to be UTF-8.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
        data_any: Any = doc.unwrap()
        return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        return {}
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        return {}


def extract_sourcemark_table(path: Path, data: TomlTable) -> TomlTable | None:
    """Return the SourceMark part of a parsed config file.

    For ``pyproject.toml`` this is the ``[tool.sourcemark]`` table; any other file
    is a dedicated SourceMark config and is returned whole.

    Args:
        path (Path): The file the data was read from.
        data (TomlTable): Parsed TOML content of ``path``.

    Returns:
        TomlTable | None: The SourceMark table, or ``None`` when a ``pyproject.toml``
            carries no ``[tool.sourcemark]`` section.
    """
    if path.name != PYPROJECT_TOML_NAME:
        return data
    tool: Any = data.get(Toml.SECTION_TOOL, {})
    if not isinstance(tool, dict):
        return None
    section: Any = cast("TomlTable", tool).get(Toml.SECTION_SOURCEMARK)
    if not isinstance(section, dict):
        return None
    return cast("TomlTable", section)


def _strip_none_for_toml(value: object) -> object:
    """Remove TOML-incompatible `None` from mappings/lists.

    TOML has no `null`. For config dumps we omit keys with None values and drop
    None items from lists.
    """
    if isinstance(value, Mapping):
        out: dict[str, object] = {}
        m: Mapping[object, object] = cast("Mapping[object, object]", value)
        for k_any, v_any in m.items():
            if v_any is None:
                logger.debug("Ignoring `None` entry in Mapping for key %s", k_any)
                continue
            out[str(k_any)] = _strip_none_for_toml(v_any)
        return out

    if isinstance(value, (list, tuple)):
        seq: list[object] = list(cast("list[object]", value))
        return [_strip_none_for_toml(v) for v in seq if v is not None]

    return value


def to_toml(toml_dict: TomlTable) -> str:
    """Serialize a TOML mapping to a string.

    Args:
        toml_dict (TomlTable): TOML mapping to render.

    Returns:
        str: The rendered TOML document.
    """
    cleaned: Any = _strip_none_for_toml(toml_dict)
    return cast("str", cast("Any", tomlkit).dumps(cast("Mapping[str, Any]", cleaned)))


def nest_under_tool_section(toml_dict: TomlTable) -> TomlTable:
    """Wrap a SourceMark table as ``[tool.sourcemark]`` for ``pyproject.toml``.

    Args:
        toml_dict (TomlTable): A top-level SourceMark config table.

    Returns:
        TomlTable: ``{"tool": {"sourcemark": toml_dict}}``.
    """
    return {Toml.SECTION_TOOL: {Toml.SECTION_SOURCEMARK: toml_dict}}
