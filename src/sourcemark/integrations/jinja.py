# topmark:header:start
#
#   project      : SourceMark
#   file         : jinja.py
#   file_relpath : src/sourcemark/integrations/jinja.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Jinja2 integration.

`SourceMarkExtension` runs the annotation engine from Jinja's ``preprocess``
hook, i.e. on the raw template source right before it is lexed and compiled.

Usage:
    ```python
    from jinja2 import Environment, FileSystemLoader

    from sourcemark.config import MutableConfig
    from sourcemark.integrations.jinja import SourceMarkExtension

    env = Environment(loader=FileSystemLoader("templates"), extensions=[SourceMarkExtension])
    env.sourcemark_config = MutableConfig(environment="development").freeze()
    ```

When ``sourcemark_config`` is left as ``None`` the configuration is resolved
once, lazily, with `sourcemark.config.load_config`.

Directive delimiters always come from the environment itself (its block,
variable and comment start/end strings), so custom Jinja delimiters work
without extra configuration.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from jinja2.ext import Extension

from sourcemark.config import Config, DirectiveSyntax, load_config
from sourcemark.config.logging import get_logger
from sourcemark.pipeline.engine import normalize_template_identifier, process

if TYPE_CHECKING:
    from jinja2 import Environment

    from sourcemark.config.logging import SourcemarkLogger
    from sourcemark.config.types import DelimiterPair

logger: SourcemarkLogger = get_logger(__name__)


def environment_delimiters(environment: Environment) -> tuple[DelimiterPair, ...]:
    """Return the directive delimiter pairs configured on a Jinja environment."""
    return (
        (environment.block_start_string, environment.block_end_string),
        (environment.variable_start_string, environment.variable_end_string),
        (environment.comment_start_string, environment.comment_end_string),
    )


class SourceMarkExtension(Extension):
    """Inject source attributes into HTML start tags of Jinja templates."""

    def __init__(self, environment: Environment) -> None:
        super().__init__(environment)
        environment.extend(sourcemark_config=None)
        self._resolved: Config | None = None

    def _config(self) -> Config:
        configured: Config | None = getattr(self.environment, "sourcemark_config", None)
        base: Config
        if configured is not None:
            base = configured
        else:
            if self._resolved is None:
                self._resolved = load_config()
                logger.debug("Resolved SourceMark config for Jinja: %s", self._resolved)
            base = self._resolved
        return replace(
            base,
            directive_syntax=DirectiveSyntax.JINJA,
            directive_delimiters=environment_delimiters(self.environment),
        )

    def template_identifier(self, name: str | None, filename: str | None, config: Config) -> str:
        """Choose the identifier used in locators.

        The on-disk ``filename`` is preferred when it lies under the configured
        project root; otherwise the template ``name`` is used.

        Args:
            name (str | None): Template name as requested from the loader.
            filename (str | None): Template file path, if the loader provides one.
            config (Config): Effective configuration.

        Returns:
            str: The identifier.
        """
        if filename and config.project_root is not None:
            relative: str = normalize_template_identifier(filename, config.project_root)
            if relative != filename.replace("\\", "/"):
                return relative
        return name or filename or "<template>"

    def preprocess(self, source: str, name: str | None, filename: str | None = None) -> str:
        """Annotate ``source`` before Jinja compiles it.

        Args:
            source (str): Raw template source.
            name (str | None): Template name.
            filename (str | None): Template file path, if known.

        Returns:
            str: The annotated source (unchanged when the config is inactive).
        """
        config: Config = self._config()
        return process(source, self.template_identifier(name, filename, config), config)
