# topmark:header:start
#
#   project      : SourceMark
#   file         : __init__.py
#   file_relpath : src/sourcemark/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SourceMark configuration.

Public entry points:
    - `Config` / `MutableConfig`: immutable snapshot and mutable builder.
    - `load_config`: defaults → discovered files → explicit files → environment.

Example:
    ```python
    from sourcemark.config import MutableConfig

    cfg = MutableConfig(environment="development", attribute_name="data-src").freeze()
    assert cfg.is_active
    ```
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from sourcemark.config.model import Config, MutableConfig
from sourcemark.config.types import DirectiveSyntax, UnterminatedTagPolicy

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

__all__ = [
    "Config",
    "DirectiveSyntax",
    "MutableConfig",
    "UnterminatedTagPolicy",
    "load_config",
]


def load_config(
    start: Path | None = None,
    *,
    extra_config_files: Iterable[Path] = (),
    environ: Mapping[str, str] | None = None,
    discover: bool = True,
) -> Config:
    """Resolve the effective configuration and freeze it.

    Args:
        start (Path | None): Directory to start config discovery from (CWD if None).
        extra_config_files (Iterable[Path]): Explicit config files merged after discovery.
        environ (Mapping[str, str] | None): Environment overrides; defaults to ``os.environ``.
        discover (bool): Whether to walk upward for ``sourcemark.toml`` / ``pyproject.toml``.

    Returns:
        Config: The frozen configuration.
    """
    return MutableConfig.load_merged(
        start=start,
        extra_config_files=extra_config_files,
        environ=os.environ if environ is None else environ,
        discover=discover,
    ).freeze()
