# topmark:header:start
#
#   project      : SourceMark
#   file         : file.py
#   file_relpath : src/sourcemark/utils/file.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""File helpers for SourceMark: discovery, relative paths and text I/O.

Templates are read and written as UTF-8 with ``newline=""`` so that line
endings pass through untouched.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from pathspec import PathSpec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern

from sourcemark.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sourcemark.config.logging import SourcemarkLogger

logger: SourcemarkLogger = get_logger(__name__)


def compute_relpath(file_path: Path, root_path: Path | None) -> Path:
    """Compute the relative path from root_path to file_path.

    Args:
        file_path (Path): The file path to compute the relative path for.
        root_path (Path | None): The root path to compute the relative path from
            (the current directory if None).

    Returns:
        Path: The relative path from root_path to file_path.
    """
    resolved_path = file_path.resolve()
    resolved_root = (root_path or Path.cwd()).resolve()

    try:
        return resolved_path.relative_to(resolved_root)
    except ValueError:
        # Not a subpath: fall back to a ../-style relative path
        return Path(os.path.relpath(resolved_path, start=resolved_root))


def find_template_files(
    paths: Iterable[Path],
    *,
    include_patterns: Iterable[str],
    exclude_patterns: Iterable[str] = (),
) -> list[Path]:
    """Expand files and directories into the list of template files to process.

    Explicitly named files are always kept (unless excluded); directories are
    walked recursively and only files whose name matches one of
    ``include_patterns`` are kept. ``exclude_patterns`` use gitignore syntax and
    are matched against paths relative to the directory being walked (or the
    file name for explicit files).

    Args:
        paths (Iterable[Path]): Files and/or directories.
        include_patterns (Iterable[str]): Glob patterns for file names, e.g. ``*.html``.
        exclude_patterns (Iterable[str]): Gitignore-style exclusion patterns.

    Returns:
        list[Path]: Matching files, deduplicated, in discovery order.
    """
    include: PathSpec = PathSpec.from_lines(GitWildMatchPattern, list(include_patterns))
    exclude: PathSpec = PathSpec.from_lines(GitWildMatchPattern, list(exclude_patterns))

    seen: set[Path] = set()
    result: list[Path] = []

    def _add(path: Path) -> None:
        key: Path = path.resolve()
        if key not in seen:
            seen.add(key)
            result.append(path)

    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if not candidate.is_file():
                    continue
                rel: str = candidate.relative_to(path).as_posix()
                if exclude.match_file(rel):
                    logger.debug("Excluded: %s", candidate)
                    continue
                if include.match_file(candidate.name):
                    _add(candidate)
        elif exclude.match_file(path.name):
            logger.debug("Excluded: %s", path)
        else:
            _add(path)
    return result


def read_text(path: Path) -> str:
    """Read a UTF-8 text file, preserving its line endings.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    with path.open("r", encoding="utf-8", newline="") as fp:
        return fp.read()


def write_text(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` as UTF-8 without newline translation.

    The content is written to a sibling temporary file first and then moved
    into place, so a failed write never leaves a truncated template behind.

    Raises:
        OSError: If the file cannot be written.
    """
    tmp: Path = path.with_name(f".{path.name}.sourcemark.tmp")
    try:
        with tmp.open("w", encoding="utf-8", newline="") as fp:
            fp.write(text)
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()
