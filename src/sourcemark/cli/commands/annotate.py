# topmark:header:start
#
#   project      : SourceMark
#   file         : annotate.py
#   file_relpath : src/sourcemark/cli/commands/annotate.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SourceMark `annotate` command.

Adds the source attribute to the start tags of template files.

By default this is a dry run: files are scanned, a per-file status is printed
and the exit code is ``2`` (WOULD_CHANGE) if any file would change. Use
``--apply`` to write the annotated templates back, and ``--diff`` to see the
unified diff of each change.

Passing ``-`` as the only PATH reads one template from STDIN and writes the
annotated text to STDOUT (``--stdin-filename`` sets the template identifier).

Annotation only happens when the effective configuration is active: the
``enabled`` flag is on and the environment is a development environment.
``--env development`` is the usual way to request that on the command line.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click
from yachalk import chalk

from sourcemark.cli.config_resolver import resolve_config
from sourcemark.cli.errors import (
    SourcemarkEncodingError,
    SourcemarkFileNotFoundError,
    SourcemarkIOError,
    SourcemarkUsageError,
)
from sourcemark.cli.exit_codes import ExitCode
from sourcemark.cli.options import CONTEXT_SETTINGS, common_config_options
from sourcemark.config.logging import get_logger
from sourcemark.config.types import DirectiveSyntax
from sourcemark.pipeline.engine import annotate
from sourcemark.rendering.colored_enum import ColoredStrEnum
from sourcemark.utils.diff import make_patch, render_patch
from sourcemark.utils.file import compute_relpath, find_template_files, read_text, write_text

if TYPE_CHECKING:
    from sourcemark.cli.console import ClickConsole
    from sourcemark.config import Config
    from sourcemark.config.logging import SourcemarkLogger
    from sourcemark.pipeline.outcomes import ScanReport

logger: SourcemarkLogger = get_logger(__name__)

STDIN_IDENTIFIER: str = "<stdin>"


class FileOutcome(ColoredStrEnum):
    """Per-file result of an `annotate` run."""

    UNCHANGED = ("unchanged", chalk.green)
    WOULD_CHANGE = ("would annotate", chalk.yellow)
    CHANGED = ("annotated", chalk.green_bright)
    ERROR = ("error", chalk.red_bright)


def _render_status(
    console: ClickConsole, outcome: FileOutcome, display: str, report: ScanReport | None
) -> None:
    detail: str = ""
    if report is not None and report.instrumented:
        detail = f" ({report.instrumented} tag(s))"
    label: str = outcome.paint(f"{outcome.value:<15}", enabled=console.enable_color)
    console.print(f"{label} {display}{detail}")


def _annotate_stdin(console: ClickConsole, config: Config, stdin_filename: str | None) -> None:
    source: str = click.get_text_stream("stdin").read()
    report: ScanReport = annotate(source, stdin_filename or STDIN_IDENTIFIER, config)
    console.write(report.text)


@click.command(
    name="annotate",
    help="Add source attributes to the HTML start tags of template files.",
    epilog=(
        "Exit codes: 0 nothing to do or changes applied, 2 changes would be made "
        "(dry run), 64 usage error, 65 undecodable file, 66 missing path, "
        "74 I/O error, 78 configuration error."
    ),
    context_settings=CONTEXT_SETTINGS,
)
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(path_type=Path),
)
@click.option("--apply", "apply_changes", is_flag=True, help="Write annotated templates back.")
@click.option("--diff", "show_diff", is_flag=True, help="Show a unified diff of each change.")
@click.option(
    "--env",
    "environment",
    default=None,
    help="Runtime environment name (overrides config and SOURCEMARK_ENV).",
)
@click.option(
    "--attribute",
    "attribute_name",
    default=None,
    help="Name of the injected attribute (e.g. data-source-id).",
)
@click.option(
    "--syntax",
    "directive_syntax",
    type=click.Choice([s.value for s in DirectiveSyntax]),
    default=None,
    callback=lambda _ctx, _param, value: DirectiveSyntax(value) if value else None,
    help="Template directive syntax whose regions are left untouched.",
)
@click.option(
    "--project-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory stripped from template paths in locators (default: current directory).",
)
@click.option(
    "--stdin-filename",
    default=None,
    help="Template identifier to use when reading from STDIN ('-').",
)
@click.option(
    "--exclude",
    "exclude_patterns",
    multiple=True,
    help="Gitignore-style pattern of files to skip. Repeatable.",
)
@common_config_options
def annotate_command(
    *,
    paths: tuple[Path, ...],
    apply_changes: bool,
    show_diff: bool,
    environment: str | None,
    attribute_name: str | None,
    directive_syntax: DirectiveSyntax | None,
    project_root: Path | None,
    stdin_filename: str | None,
    exclude_patterns: tuple[str, ...],
    no_config: bool,
    config_paths: tuple[Path, ...],
) -> None:
    """Annotate template files with source attributes.

    Args:
        paths (tuple[Path, ...]): Template files and/or directories, or ``-`` for STDIN.
        apply_changes (bool): Write changes back instead of doing a dry run.
        show_diff (bool): Print a unified diff for every changed file.
        environment (str | None): Runtime environment override.
        attribute_name (str | None): Attribute name override.
        directive_syntax (DirectiveSyntax | None): Directive syntax override.
        project_root (Path | None): Project root override.
        stdin_filename (str | None): Identifier for STDIN content.
        exclude_patterns (tuple[str, ...]): Extra exclusion patterns.
        no_config (bool): If True, skip discovery of config files.
        config_paths (tuple[Path, ...]): Additional configuration files to merge.

    Raises:
        SourcemarkUsageError: If no PATHS are given, or ``-`` is mixed with files.
        SourcemarkFileNotFoundError: If a given path does not exist.
        SourcemarkEncodingError: If a template is not valid UTF-8.
        SourcemarkIOError: If a template cannot be read or written.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ClickConsole = ctx.obj["console"]

    if not paths:
        raise SourcemarkUsageError("No PATHS given. Pass template files, directories, or '-'.")
    stdin_mode: bool = any(str(p) == "-" for p in paths)
    if stdin_mode and len(paths) > 1:
        raise SourcemarkUsageError("'-' (read from STDIN) cannot be combined with other PATHS.")

    config: Config = resolve_config(
        no_config=no_config,
        config_paths=config_paths,
        environment=environment,
        attribute_name=attribute_name,
        directive_syntax=directive_syntax,
        project_root=project_root,
        exclude_patterns=exclude_patterns,
    )

    if not config.is_active:
        hint: str = (
            f" Hint: pass --env {config.development_environments[0]}."
            if config.development_environments
            else ""
        )
        console.warn(
            f"Source mapping is inactive (enabled={config.enabled}, "
            f"environment={config.environment!r}); nothing will be annotated.{hint}"
        )

    if stdin_mode:
        if apply_changes or show_diff:
            console.warn("Note: --apply and --diff are ignored when reading from STDIN.")
        _annotate_stdin(console, config, stdin_filename)
        return

    missing: list[Path] = [p for p in paths if not p.exists()]
    if missing:
        raise SourcemarkFileNotFoundError(
            "Path(s) not found: " + ", ".join(str(p) for p in missing)
        )

    if not config.is_active:
        return

    files: list[Path] = find_template_files(
        paths,
        include_patterns=config.include_patterns,
        exclude_patterns=config.exclude_patterns,
    )
    logger.info("Annotating %d template file(s)", len(files))
    if not files:
        console.print("No template files found.")
        return

    errors: list[click.ClickException] = []
    would_change: int = 0
    written: int = 0

    for path in files:
        display: str = compute_relpath(path, config.project_root).as_posix()
        try:
            original: str = read_text(path)
        except UnicodeDecodeError as exc:
            logger.error("%s: not valid UTF-8: %s", display, exc)
            errors.append(SourcemarkEncodingError(f"{display}: not valid UTF-8"))
            _render_status(console, FileOutcome.ERROR, display, None)
            continue
        except OSError as exc:
            logger.error("%s: cannot read: %s", display, exc)
            errors.append(SourcemarkIOError(f"{display}: {exc.strerror or exc}"))
            _render_status(console, FileOutcome.ERROR, display, None)
            continue

        report: ScanReport = annotate(original, str(path.resolve()), config)
        if report.text == original:
            _render_status(console, FileOutcome.UNCHANGED, display, report)
            continue

        would_change += 1
        if show_diff:
            console.print(render_patch(make_patch(original, report.text, display)), nl=False)

        if not apply_changes:
            _render_status(console, FileOutcome.WOULD_CHANGE, display, report)
            continue

        try:
            write_text(path, report.text)
        except OSError as exc:
            logger.error("%s: cannot write: %s", display, exc)
            errors.append(SourcemarkIOError(f"{display}: {exc.strerror or exc}"))
            _render_status(console, FileOutcome.ERROR, display, None)
            continue
        written += 1
        _render_status(console, FileOutcome.CHANGED, display, report)

    if apply_changes:
        msg: str = f"Annotated {written} file(s)." if written else "No changes to apply."
        console.print(console.styled(msg, fg="green", bold=True))
    elif would_change:
        console.print(
            console.styled(
                f"{would_change} file(s) would be annotated. Run with --apply to write them.",
                fg="yellow",
            )
        )

    if errors:
        # Report the first failure; the rest were logged and listed above
        raise errors[0]
    if would_change and not apply_changes:
        ctx.exit(ExitCode.WOULD_CHANGE)
