# topmark:header:start
#
#   project      : SourceMark
#   file         : model.py
#   file_relpath : src/sourcemark/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model and merge policy.

This module defines:
    - `Config`: an immutable snapshot handed to the annotation engine.
    - `MutableConfig`: a mutable builder used during discovery/merge; it
      can be frozen into `Config` and thawed back for edits.

Layering (last wins):
    packaged defaults → discovered config files (root-most → nearest) →
    explicit config files → environment variables → CLI overrides.

The engine never reads the process environment itself: ``SOURCEMARK_*``
variables are folded in here, by `MutableConfig.apply_environ`, so that
`sourcemark.pipeline.engine.process` stays a pure function of its arguments.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from sourcemark.config.keys import Toml
from sourcemark.config.loaders import (
    extract_sourcemark_table,
    load_defaults_dict,
    load_toml_dict,
)
from sourcemark.config.logging import get_logger
from sourcemark.config.types import DirectiveSyntax, UnterminatedTagPolicy
from sourcemark.constants import (
    ENV_ATTRIBUTE,
    ENV_ENABLED,
    ENV_ENVIRONMENT,
    PYPROJECT_TOML_NAME,
    SOURCEMARK_TOML_NAME,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sourcemark.config.logging import SourcemarkLogger
    from sourcemark.config.types import DelimiterPair, TomlTable

logger: SourcemarkLogger = get_logger(__name__)

_TRUTHY: frozenset[str] = frozenset({"1", "true", "yes", "on"})
_FALSY: frozenset[str] = frozenset({"0", "false", "no", "off", ""})

# Characters that may not appear in an HTML attribute name.
_FORBIDDEN_ATTRIBUTE_CHARS: frozenset[str] = frozenset("\"'<>/=`")


def is_valid_attribute_name(name: str) -> bool:
    """Return True if ``name`` can be written as an HTML attribute name."""
    if not name:
        return False
    return not any(ch.isspace() or ch in _FORBIDDEN_ATTRIBUTE_CHARS for ch in name)


def parse_bool_text(value: str) -> bool | None:
    """Interpret an environment-style boolean string.

    Args:
        value (str): Raw text, e.g. ``"1"``, ``"true"``, ``"off"``.

    Returns:
        bool | None: The boolean, or ``None`` if the text is not recognized.
    """
    v: str = value.strip().lower()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    return None


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration for SourceMark.

    Attributes:
        enabled (bool): Feature flag. Instrumentation runs only when this is True
            **and** ``environment`` is one of ``development_environments``.
        environment (str): Name of the current runtime environment.
        development_environments (tuple[str, ...]): Environment names considered
            development-like.
        attribute_name (str): Name of the injected attribute (e.g. ``data-source-id``).
        project_root (Path | None): Prefix stripped from template identifiers so
            locators are relative paths.
        directive_syntax (DirectiveSyntax): Template directive flavour.
        directive_delimiters (tuple[DelimiterPair, ...]): Effective directive
            delimiter pairs (derived from ``directive_syntax`` unless set explicitly).
        unterminated_tags (UnterminatedTagPolicy): Handling of a tag still open at
            end of input.
        max_tag_lines (int): Cap on lines buffered for one multi-line tag
            (``0`` = unbounded).
        include_patterns (tuple[str, ...]): Glob patterns for template discovery (CLI).
        exclude_patterns (tuple[str, ...]): Gitignore-style exclusions (CLI).
        config_files (tuple[Path | str, ...]): Provenance of merged config sources.
    """

    enabled: bool
    environment: str
    development_environments: tuple[str, ...]
    attribute_name: str
    project_root: Path | None
    directive_syntax: DirectiveSyntax
    directive_delimiters: tuple[DelimiterPair, ...]
    unterminated_tags: UnterminatedTagPolicy
    max_tag_lines: int
    include_patterns: tuple[str, ...]
    exclude_patterns: tuple[str, ...]
    config_files: tuple[Path | str, ...]

    @property
    def is_active(self) -> bool:
        """Whether instrumentation runs for this configuration."""
        return self.enabled and self.environment in self.development_environments

    @classmethod
    def from_defaults(cls) -> Config:
        """Return the frozen packaged defaults."""
        return MutableConfig.from_defaults().freeze()

    def to_toml_dict(self) -> TomlTable:
        """Convert this Config into a TOML-serializable dict.

        Returns:
            TomlTable: Mapping in the ``sourcemark.toml`` schema.
        """
        scanner: TomlTable = {
            Toml.KEY_DIRECTIVE_SYNTAX: self.directive_syntax.value,
            Toml.KEY_UNTERMINATED_TAGS: self.unterminated_tags.value,
            Toml.KEY_MAX_TAG_LINES: self.max_tag_lines,
        }
        if self.directive_delimiters != self.directive_syntax.delimiters:
            scanner[Toml.KEY_DIRECTIVE_DELIMITERS] = [list(p) for p in self.directive_delimiters]
        return {
            Toml.KEY_ENABLED: self.enabled,
            Toml.KEY_ENVIRONMENT: self.environment,
            Toml.KEY_DEVELOPMENT_ENVIRONMENTS: list(self.development_environments),
            Toml.KEY_ATTRIBUTE_NAME: self.attribute_name,
            Toml.KEY_PROJECT_ROOT: (
                self.project_root.as_posix() if self.project_root is not None else None
            ),
            Toml.SECTION_SCANNER: scanner,
            Toml.SECTION_FILES: {
                Toml.KEY_INCLUDE_PATTERNS: list(self.include_patterns),
                Toml.KEY_EXCLUDE_PATTERNS: list(self.exclude_patterns),
            },
        }

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this frozen Config."""
        explicit: list[DelimiterPair] = (
            list(self.directive_delimiters)
            if self.directive_delimiters != self.directive_syntax.delimiters
            else []
        )
        return MutableConfig(
            enabled=self.enabled,
            environment=self.environment,
            development_environments=list(self.development_environments),
            attribute_name=self.attribute_name,
            project_root=self.project_root,
            directive_syntax=self.directive_syntax,
            directive_delimiters=explicit,
            unterminated_tags=self.unterminated_tags,
            max_tag_lines=self.max_tag_lines,
            include_patterns=list(self.include_patterns),
            exclude_patterns=list(self.exclude_patterns),
            config_files=list(self.config_files),
        )


# -------------------------- Mutable builder --------------------------


@dataclass
class MutableConfig:
    """Mutable configuration used during discovery and merging.

    Scalar fields use ``None`` for "inherit"; list fields use an empty list.
    `freeze` fills whatever is still unset from the packaged defaults, so a
    builder does not need to start from `from_defaults`.
    """

    enabled: bool | None = None
    environment: str | None = None
    development_environments: list[str] = field(default_factory=lambda: [])
    attribute_name: str | None = None
    project_root: Path | None = None
    directive_syntax: DirectiveSyntax | None = None
    directive_delimiters: list[DelimiterPair] = field(default_factory=lambda: [])
    unterminated_tags: UnterminatedTagPolicy | None = None
    max_tag_lines: int | None = None
    include_patterns: list[str] = field(default_factory=lambda: [])
    exclude_patterns: list[str] = field(default_factory=lambda: [])
    config_files: list[Path | str] = field(default_factory=lambda: [])

    # ---------------------------- Build/freeze ----------------------------
    def freeze(self) -> Config:
        """Freeze this builder into an immutable Config.

        Raises:
            ValueError: If the attribute name is not a valid HTML attribute name or
                ``max_tag_lines`` is negative.
        """
        draft: MutableConfig = MutableConfig.from_defaults().merge_with(self)

        attribute_name: str = draft.attribute_name or ""
        if not is_valid_attribute_name(attribute_name):
            raise ValueError(f"Invalid attribute name: {attribute_name!r}")
        max_tag_lines: int = draft.max_tag_lines if draft.max_tag_lines is not None else 0
        if max_tag_lines < 0:
            raise ValueError(f"max_tag_lines must be >= 0, got {max_tag_lines}")

        syntax: DirectiveSyntax = draft.directive_syntax or DirectiveSyntax.ERB
        delimiters: tuple[DelimiterPair, ...] = (
            tuple(draft.directive_delimiters) if draft.directive_delimiters else syntax.delimiters
        )

        return Config(
            enabled=bool(draft.enabled),
            environment=draft.environment or "",
            development_environments=tuple(draft.development_environments),
            attribute_name=attribute_name,
            project_root=draft.project_root,
            directive_syntax=syntax,
            directive_delimiters=delimiters,
            unterminated_tags=draft.unterminated_tags or UnterminatedTagPolicy.PASSTHROUGH,
            max_tag_lines=max_tag_lines,
            include_patterns=tuple(draft.include_patterns),
            exclude_patterns=tuple(draft.exclude_patterns),
            config_files=tuple(draft.config_files),
        )

    # --------------------------- Loaders/parsers --------------------------
    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a builder populated with the runtime defaults."""
        return cls.from_toml_dict(load_defaults_dict(), config_file=None)

    @classmethod
    def from_toml_dict(cls, data: TomlTable, *, config_file: Path | None) -> MutableConfig:
        """Parse a SourceMark TOML table into a builder.

        Values of the wrong type are reported with a warning and ignored.

        Args:
            data (TomlTable): Top-level SourceMark table (already extracted from
                ``[tool.sourcemark]`` for ``pyproject.toml``).
            config_file (Path | None): File the table came from; ``project_root`` is
                resolved against its directory. ``None`` for packaged defaults.

        Returns:
            MutableConfig: The parsed builder.
        """
        where: str = str(config_file) if config_file is not None else "<defaults>"
        draft = cls()

        draft.enabled = _get_bool(data, Toml.KEY_ENABLED, where)
        draft.environment = _get_str(data, Toml.KEY_ENVIRONMENT, where)
        draft.development_environments = _get_str_list(
            data, Toml.KEY_DEVELOPMENT_ENVIRONMENTS, where
        )
        draft.attribute_name = _get_str(data, Toml.KEY_ATTRIBUTE_NAME, where)

        root_raw: str | None = _get_str(data, Toml.KEY_PROJECT_ROOT, where)
        if root_raw is not None:
            root = Path(root_raw).expanduser()
            if not root.is_absolute() and config_file is not None:
                root = config_file.parent / root
            draft.project_root = root.resolve()

        scanner: TomlTable = _get_table(data, Toml.SECTION_SCANNER, where)
        syntax_raw: str | None = _get_str(scanner, Toml.KEY_DIRECTIVE_SYNTAX, where)
        if syntax_raw is not None:
            try:
                draft.directive_syntax = DirectiveSyntax(syntax_raw)
            except ValueError:
                logger.warning(
                    "%s: unknown %s %r (expected one of: %s)",
                    where,
                    Toml.KEY_DIRECTIVE_SYNTAX,
                    syntax_raw,
                    ", ".join(v.value for v in DirectiveSyntax),
                )
        policy_raw: str | None = _get_str(scanner, Toml.KEY_UNTERMINATED_TAGS, where)
        if policy_raw is not None:
            try:
                draft.unterminated_tags = UnterminatedTagPolicy(policy_raw)
            except ValueError:
                logger.warning(
                    "%s: unknown %s %r (expected one of: %s)",
                    where,
                    Toml.KEY_UNTERMINATED_TAGS,
                    policy_raw,
                    ", ".join(v.value for v in UnterminatedTagPolicy),
                )
        draft.max_tag_lines = _get_int(scanner, Toml.KEY_MAX_TAG_LINES, where)
        draft.directive_delimiters = _get_delimiters(
            scanner, Toml.KEY_DIRECTIVE_DELIMITERS, where
        )

        files: TomlTable = _get_table(data, Toml.SECTION_FILES, where)
        draft.include_patterns = _get_str_list(files, Toml.KEY_INCLUDE_PATTERNS, where)
        draft.exclude_patterns = _get_str_list(files, Toml.KEY_EXCLUDE_PATTERNS, where)

        if config_file is not None:
            draft.config_files = [config_file]
        return draft

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig | None:
        """Load configuration from a single TOML file.

        Supports both ``sourcemark.toml`` and ``pyproject.toml`` (``[tool.sourcemark]``).

        Args:
            path (Path): Path to the TOML file.

        Returns:
            MutableConfig | None: The parsed builder, or ``None`` if the file holds
                no SourceMark configuration.
        """
        logger.debug("Creating MutableConfig from TOML config: %s", path)
        table: TomlTable | None = extract_sourcemark_table(path, load_toml_dict(path))
        if table is None:
            logger.debug("No [tool.sourcemark] section in %s", path)
            return None
        return cls.from_toml_dict(table, config_file=path)

    @classmethod
    def discover_config_files(cls, start: Path) -> list[Path]:
        """Return config files found by walking upward from ``start``.

        Files are returned root-most first so a later merge gives the nearest
        file precedence. In one directory ``pyproject.toml`` comes before
        ``sourcemark.toml``. A file declaring ``root = true`` stops the walk
        after its directory.

        Args:
            start (Path): Directory (or file) to start from.

        Returns:
            list[Path]: Discovered config files, root-most → nearest.
        """
        anchor: Path = start.resolve()
        if anchor.is_file():
            anchor = anchor.parent

        found: list[Path] = []
        for directory in (anchor, *anchor.parents):
            level: list[Path] = []
            stop = False
            for name in (PYPROJECT_TOML_NAME, SOURCEMARK_TOML_NAME):
                candidate: Path = directory / name
                if not candidate.is_file():
                    continue
                table = extract_sourcemark_table(candidate, load_toml_dict(candidate))
                if table is None:
                    continue
                level.append(candidate)
                if table.get(Toml.KEY_ROOT) is True:
                    stop = True
            found = level + found
            if stop:
                break
        logger.debug("Discovered config files: %s", found)
        return found

    @classmethod
    def load_merged(
        cls,
        *,
        start: Path | None = None,
        extra_config_files: Iterable[Path] = (),
        environ: Mapping[str, str] | None = None,
        discover: bool = True,
    ) -> MutableConfig:
        """Build a merged builder from defaults, files and the environment.

        Args:
            start (Path | None): Directory to start discovery from (CWD if None).
            extra_config_files (Iterable[Path]): Explicit files, merged after discovery.
            environ (Mapping[str, str] | None): Environment variables to apply
                (``None`` skips the environment layer).
            discover (bool): Whether to walk upward for config files.

        Returns:
            MutableConfig: The merged builder.
        """
        draft: MutableConfig = cls.from_defaults()
        if discover:
            for path in cls.discover_config_files(start or Path.cwd()):
                mc = cls.from_toml_file(path)
                if mc is not None:
                    draft = draft.merge_with(mc)
        for extra in extra_config_files:
            mc = cls.from_toml_file(Path(extra))
            if mc is not None:
                draft = draft.merge_with(mc)
        if environ is not None:
            draft = draft.apply_environ(environ)
        return draft

    # ------------------------------- Merging -------------------------------
    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new builder where values set in ``other`` override this one.

        Args:
            other (MutableConfig): The config whose values override those of this draft.

        Returns:
            MutableConfig: A new builder representing the merged result.
        """
        return MutableConfig(
            enabled=other.enabled if other.enabled is not None else self.enabled,
            environment=other.environment if other.environment is not None else self.environment,
            development_environments=other.development_environments
            or self.development_environments,
            attribute_name=other.attribute_name
            if other.attribute_name is not None
            else self.attribute_name,
            project_root=other.project_root
            if other.project_root is not None
            else self.project_root,
            directive_syntax=other.directive_syntax
            if other.directive_syntax is not None
            else self.directive_syntax,
            # An explicit syntax in `other` discards inherited custom delimiters.
            directive_delimiters=other.directive_delimiters
            or ([] if other.directive_syntax is not None else self.directive_delimiters),
            unterminated_tags=other.unterminated_tags
            if other.unterminated_tags is not None
            else self.unterminated_tags,
            max_tag_lines=other.max_tag_lines
            if other.max_tag_lines is not None
            else self.max_tag_lines,
            include_patterns=other.include_patterns or self.include_patterns,
            exclude_patterns=other.exclude_patterns or self.exclude_patterns,
            config_files=self.config_files + other.config_files,
        )

    def apply_environ(self, environ: Mapping[str, str]) -> MutableConfig:
        """Return a new builder with ``SOURCEMARK_*`` environment overrides applied.

        Args:
            environ (Mapping[str, str]): Environment mapping (usually ``os.environ``).

        Returns:
            MutableConfig: The updated builder.
        """
        overlay = MutableConfig()
        raw_enabled: str | None = environ.get(ENV_ENABLED)
        if raw_enabled is not None:
            overlay.enabled = parse_bool_text(raw_enabled)
            if overlay.enabled is None:
                logger.warning("Ignoring %s=%r (not a boolean)", ENV_ENABLED, raw_enabled)
        env_name: str | None = environ.get(ENV_ENVIRONMENT)
        if env_name:
            overlay.environment = env_name.strip()
        attribute: str | None = environ.get(ENV_ATTRIBUTE)
        if attribute:
            overlay.attribute_name = attribute.strip()
        if overlay != MutableConfig():
            overlay.config_files = ["<environment>"]
        return self.merge_with(overlay)


# ------------------------------- TOML getters -------------------------------


def _get_table(table: TomlTable, key: str, where: str) -> TomlTable:
    value: Any = table.get(key)
    if value is None:
        return {}
    if isinstance(value, dict):
        return cast("TomlTable", value)
    logger.warning("%s: [%s] must be a table, got %s", where, key, type(value).__name__)
    return {}


def _get_bool(table: TomlTable, key: str, where: str) -> bool | None:
    value: Any = table.get(key)
    if value is None or isinstance(value, bool):
        return value
    logger.warning("%s: %s must be a boolean, got %r", where, key, value)
    return None


def _get_str(table: TomlTable, key: str, where: str) -> str | None:
    value: Any = table.get(key)
    if value is None or isinstance(value, str):
        return value
    logger.warning("%s: %s must be a string, got %r", where, key, value)
    return None


def _get_int(table: TomlTable, key: str, where: str) -> int | None:
    value: Any = table.get(key)
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    logger.warning("%s: %s must be an integer, got %r", where, key, value)
    return None


def _get_str_list(table: TomlTable, key: str, where: str) -> list[str]:
    value: Any = table.get(key)
    if value is None:
        return []
    if isinstance(value, list) and all(isinstance(v, str) for v in cast("list[Any]", value)):
        return list(cast("list[str]", value))
    logger.warning("%s: %s must be a list of strings, got %r", where, key, value)
    return []


def _get_delimiters(table: TomlTable, key: str, where: str) -> list[DelimiterPair]:
    value: Any = table.get(key)
    if value is None:
        return []
    pairs: list[DelimiterPair] = []
    if isinstance(value, list):
        for item in cast("list[Any]", value):
            if (
                isinstance(item, list)
                and len(cast("list[Any]", item)) == 2
                and all(isinstance(s, str) and s for s in cast("list[Any]", item))
            ):
                opener, closer = cast("list[str]", item)
                pairs.append((opener, closer))
            else:
                logger.warning("%s: ignoring malformed delimiter pair %r", where, item)
                return []
        return pairs
    logger.warning("%s: %s must be a list of [open, close] pairs, got %r", where, key, value)
    return []
