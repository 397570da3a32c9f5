# topmark:header:start
#
#   project      : SourceMark
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the SourceMark test suite.

Notes:
    Tests should respect the immutable/mutable configuration split: build
    configs with `sourcemark.config.MutableConfig`, then `freeze()` into a
    `sourcemark.config.Config` before handing them to the pipeline. Do not
    mutate a frozen `Config`; use `Config.thaw()` and freeze again.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from sourcemark.config import MutableConfig
from sourcemark.config import logging as sm_logging
from sourcemark.constants import ENV_ATTRIBUTE, ENV_ENABLED, ENV_ENVIRONMENT, ENV_LOG_LEVEL

if TYPE_CHECKING:
    from sourcemark.config import Config

F = TypeVar("F", bound=Callable[..., object])

DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.integration`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_integration: DecoratorType[Any] = as_typed_mark(pytest.mark.integration)
mark_pipeline: DecoratorType[Any] = as_typed_mark(pytest.mark.pipeline)
mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`."""
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def clean_sourcemark_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ``SOURCEMARK_*`` variables exported in the developer's shell.

    The environment is a configuration layer; tests that exercise it set the
    variables explicitly.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture.
    """
    for name in (ENV_ENABLED, ENV_ENVIRONMENT, ENV_ATTRIBUTE, ENV_LOG_LEVEL):
        monkeypatch.delenv(name, raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Enable TRACE logging so scanner decisions show up in failure reports.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    sm_logging.setup_logging(level=sm_logging.TRACE_LEVEL)


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run a test from an isolated project directory.

    The directory carries a ``sourcemark.toml`` with ``root = true`` so config
    discovery never walks into the developer's real files.

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture to change the working directory.

    Returns:
        Path: The isolated project directory (also the current directory).
    """
    cwd: Path = tmp_path / "proj"
    cwd.mkdir()
    (cwd / "sourcemark.toml").write_text("root = true\n", encoding="utf-8")
    monkeypatch.chdir(cwd)
    return cwd


def make_config(**overrides: Any) -> Config:
    """Return a frozen `Config` built from defaults and keyword overrides.

    Args:
        **overrides (Any): Field overrides applied to a `MutableConfig`.

    Returns:
        Config: An immutable configuration snapshot for use in tests.
    """
    m = MutableConfig.from_defaults()
    for k, v in overrides.items():
        setattr(m, k, v)
    return m.freeze()


def make_dev_config(**overrides: Any) -> Config:
    """Return an active configuration (``environment="development"``)."""
    overrides.setdefault("environment", "development")
    return make_config(**overrides)
