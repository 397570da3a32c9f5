# topmark:header:start
#
#   project      : SourceMark
#   file         : engine.py
#   file_relpath : src/sourcemark/pipeline/engine.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Annotation entry points (the gatekeeper in front of the scanner).

`process` is what a template host calls before compiling a template:

    ```python
    from sourcemark.config import MutableConfig
    from sourcemark.pipeline.engine import process

    cfg = MutableConfig(environment="development").freeze()
    text = process(source, "/srv/app/views/x.html", cfg)
    ```

It is a pure function of ``(source, template_identifier, config)``: when the
configuration is not active (flag off, or not a development environment) the
source is returned unchanged and nothing is scanned.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from sourcemark.config.logging import get_logger
from sourcemark.config.model import Config
from sourcemark.config.types import UnterminatedTagPolicy
from sourcemark.pipeline.outcomes import ScanReport
from sourcemark.pipeline.scanner import TemplateScanner

if TYPE_CHECKING:
    from pathlib import Path

    from sourcemark.config.logging import SourcemarkLogger

logger: SourcemarkLogger = get_logger(__name__)


def is_active(config: Config) -> bool:
    """Return True if instrumentation should run under ``config``."""
    return config.is_active


def normalize_template_identifier(identifier: str, project_root: Path | str | None) -> str:
    """Make a template identifier relative to the project root.

    Backslashes are turned into forward slashes, then a leading
    ``project_root + "/"`` prefix is removed. Identifiers outside the root are
    returned (slash-normalized) as they are.

    Args:
        identifier (str): Template identifier, typically a file path.
        project_root (Path | str | None): Project root directory, or ``None``.

    Returns:
        str: The normalized identifier.
    """
    normalized: str = identifier.replace("\\", "/")
    if not project_root:
        return normalized
    root: str = os.fspath(project_root).replace("\\", "/").rstrip("/") + "/"
    if normalized.startswith(root):
        return normalized[len(root) :]
    return normalized


def annotate(source: str, template_identifier: str, config: Config) -> ScanReport:
    """Run the gate and, when active, the scanner; return the full report.

    Args:
        source (str): Template source text.
        template_identifier (str): Template identifier (usually its path).
        config (Config): Effective configuration.

    Returns:
        ScanReport: The transformed text and tag statistics. ``report.active`` is
            False and ``report.text is source`` when instrumentation is off.
    """
    if not is_active(config):
        logger.debug(
            "source mapping inactive (enabled=%s, environment=%r); %s unchanged",
            config.enabled,
            config.environment,
            template_identifier,
        )
        return ScanReport(text=source, active=False)

    identifier: str = normalize_template_identifier(template_identifier, config.project_root)
    scanner = TemplateScanner(
        template_identifier=identifier,
        attribute_name=config.attribute_name,
        delimiters=config.directive_delimiters,
        unterminated_tags=config.unterminated_tags,
        max_tag_lines=config.max_tag_lines,
    )
    report: ScanReport = scanner.scan(source)

    if report.unterminated is not None:
        logger.warning(
            "%s:%d: start tag never closed; %s",
            identifier,
            report.unterminated,
            "dropped from output"
            if config.unterminated_tags is UnterminatedTagPolicy.DROP
            else "passed through uninstrumented",
        )
    for start_line in report.overflowed:
        logger.warning(
            "%s:%d: start tag spans more than %d lines; left uninstrumented",
            identifier,
            start_line,
            config.max_tag_lines,
        )
    logger.debug("%s: %d tag(s) instrumented", identifier, report.instrumented)
    return report


def process(source: str, template_identifier: str, config: Config | None = None) -> str:
    """Return ``source`` with source attributes injected into its start tags.

    Args:
        source (str): Template source text.
        template_identifier (str): Template identifier (usually its path).
        config (Config | None): Effective configuration; packaged defaults if None.

    Returns:
        str: The transformed text, or ``source`` itself when inactive.
    """
    if config is None:
        config = Config.from_defaults()
    return annotate(source, template_identifier, config).text
