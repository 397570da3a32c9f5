# topmark:header:start
#
#   project      : SourceMark
#   file         : config_resolver.py
#   file_relpath : src/sourcemark/cli/config_resolver.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Resolve the effective configuration for a CLI invocation.

Precedence (last wins): packaged defaults → discovered config files → files
given with ``--config`` → ``SOURCEMARK_*`` environment variables → command
options.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from sourcemark.cli.errors import SourcemarkConfigError
from sourcemark.config import Config, MutableConfig
from sourcemark.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sourcemark.config.logging import SourcemarkLogger
    from sourcemark.config.types import DirectiveSyntax

logger: SourcemarkLogger = get_logger(__name__)


def resolve_config(
    *,
    no_config: bool,
    config_paths: Sequence[Path],
    environment: str | None = None,
    attribute_name: str | None = None,
    directive_syntax: DirectiveSyntax | None = None,
    project_root: Path | None = None,
    exclude_patterns: Sequence[str] = (),
) -> Config:
    """Merge all configuration layers and freeze the result.

    When no layer sets ``project_root``, the current directory is used so that
    locators written by the CLI are relative paths.

    Raises:
        SourcemarkConfigError: If the merged configuration is invalid.
    """
    draft: MutableConfig = MutableConfig.load_merged(
        start=Path.cwd(),
        extra_config_files=config_paths,
        environ=os.environ,
        discover=not no_config,
    )
    overrides = MutableConfig(
        environment=environment,
        attribute_name=attribute_name,
        directive_syntax=directive_syntax,
        project_root=project_root.resolve() if project_root is not None else None,
        # CLI exclusions extend the configured ones
        exclude_patterns=[*draft.exclude_patterns, *exclude_patterns],
    )
    draft = draft.merge_with(overrides)
    if draft.project_root is None:
        draft.project_root = Path.cwd().resolve()

    try:
        config: Config = draft.freeze()
    except ValueError as exc:
        raise SourcemarkConfigError(f"Invalid configuration: {exc}") from exc
    logger.debug("Effective config: %s", config)
    return config
