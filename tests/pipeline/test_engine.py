# topmark:header:start
#
#   project      : SourceMark
#   file         : test_engine.py
#   file_relpath : tests/pipeline/test_engine.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the gatekeeper entry points `process` and `annotate`."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from sourcemark.config.types import UnterminatedTagPolicy
from sourcemark.pipeline import annotate, process
from sourcemark.pipeline.engine import is_active, normalize_template_identifier
from tests.conftest import make_config, make_dev_config, mark_pipeline, parametrize

if TYPE_CHECKING:
    import pytest

SOURCE = '<div class="a">Hi</div>\n'


@mark_pipeline
def test_defaults_are_inactive_and_return_source_unchanged() -> None:
    """The packaged default environment is production."""
    assert process(SOURCE, "views/x.html") is SOURCE


@mark_pipeline
def test_development_environment_instruments() -> None:
    config = make_dev_config(attribute_name="data-src")
    assert process(SOURCE, "views/x.html", config) == (
        '<div data-src="views/x.html:1" class="a">Hi</div>\n'
    )


@mark_pipeline
@parametrize(
    ("enabled", "environment", "active"),
    [
        (True, "development", True),
        (False, "development", False),
        (True, "production", False),
        (True, "test", False),
        (False, "production", False),
    ],
)
def test_gate_requires_flag_and_development_environment(
    enabled: bool, environment: str, active: bool
) -> None:
    config = make_config(enabled=enabled, environment=environment)
    assert is_active(config) is active
    assert (process(SOURCE, "x.html", config) != SOURCE) is active


@mark_pipeline
def test_custom_development_environments() -> None:
    config = make_config(environment="staging", development_environments=["dev", "staging"])
    assert is_active(config)


@mark_pipeline
def test_disabled_annotate_reports_inactive_without_scanning() -> None:
    report = annotate("<div\n", "x.html", make_config())
    assert report.active is False
    assert report.text == "<div\n"
    assert report.unterminated is None
    assert not report.tag_counts


@mark_pipeline
def test_identifier_is_made_relative_to_project_root(tmp_path: Path) -> None:
    config = make_dev_config(project_root=tmp_path, attribute_name="data-src")
    out = process("<p>\n", str(tmp_path / "views" / "x.html"), config)
    assert out == '<p data-src="views/x.html:1">\n'


@mark_pipeline
@parametrize(
    ("identifier", "root", "expected"),
    [
        ("/srv/app/views/x.html", "/srv/app", "views/x.html"),
        ("/srv/app/views/x.html", "/srv/app/", "views/x.html"),
        ("/srv/other/x.html", "/srv/app", "/srv/other/x.html"),
        ("/srv/application/x.html", "/srv/app", "/srv/application/x.html"),
        ("C:\\app\\views\\x.html", "C:\\app", "views/x.html"),
        ("views\\x.html", None, "views/x.html"),
        ("<string>", "/srv/app", "<string>"),
    ],
)
def test_normalize_template_identifier(identifier: str, root: str | None, expected: str) -> None:
    assert normalize_template_identifier(identifier, root) == expected


@mark_pipeline
def test_unterminated_tag_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    config = make_dev_config()
    with caplog.at_level(logging.WARNING, logger="sourcemark"):
        report = annotate("ok\n<div class='x\n", "x.html", config)
    assert report.text == "ok\n<div class='x\n"
    assert "x.html:2: start tag never closed" in caplog.text
    assert "passed through" in caplog.text


@mark_pipeline
def test_dropped_unterminated_tag_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    config = make_dev_config(unterminated_tags=UnterminatedTagPolicy.DROP)
    with caplog.at_level(logging.WARNING, logger="sourcemark"):
        report = annotate("ok\n<div class='x\n", "x.html", config)
    assert report.text == "ok\n"
    assert "dropped from output" in caplog.text


@mark_pipeline
def test_overflowed_tag_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    config = make_dev_config(max_tag_lines=1)
    with caplog.at_level(logging.WARNING, logger="sourcemark"):
        report = annotate("<div\na\nb>\n", "x.html", config)
    assert report.overflowed == [1]
    assert "x.html:1: start tag spans more than 1 lines" in caplog.text


@mark_pipeline
def test_process_is_repeatable() -> None:
    config = make_dev_config()
    assert process(SOURCE, "a.html", config) == process(SOURCE, "a.html", config)
