# topmark:header:start
#
#   project      : SourceMark
#   file         : test_jinja.py
#   file_relpath : tests/integrations/test_jinja.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Integration tests: SourceMark as a Jinja2 extension."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jinja2 import DictLoader, Environment, FileSystemLoader

from sourcemark.constants import ENV_ENVIRONMENT
from sourcemark.integrations.jinja import SourceMarkExtension, environment_delimiters
from tests.conftest import make_config, make_dev_config, mark_integration

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def _env(**kwargs: object) -> Environment:
    return Environment(extensions=[SourceMarkExtension], **kwargs)  # type: ignore[arg-type]


@mark_integration
def test_rendered_markup_carries_template_name_and_line() -> None:
    env = _env(loader=DictLoader({"views/x.html": '<h1>T</h1>\n<div class="a">{{ who }}</div>'}))
    env.sourcemark_config = make_dev_config(attribute_name="data-src")  # type: ignore[attr-defined]
    out = env.get_template("views/x.html").render(who="me")
    assert out == (
        '<h1 data-src="views/x.html:1">T</h1>\n<div data-src="views/x.html:2" class="a">me</div>'
    )


@mark_integration
def test_expression_output_is_not_instrumented() -> None:
    env = _env()
    env.sourcemark_config = make_dev_config(attribute_name="data-src")  # type: ignore[attr-defined]
    out = env.from_string('{% if true %}<p>{{ "<i>" }}</p>{% endif %}{# <b> #}').render()
    assert out == '<p data-src="&lt;template&gt;:1"><i></p>'


@mark_integration
def test_custom_delimiters_come_from_the_environment() -> None:
    env = _env(variable_start_string="[[", variable_end_string="]]")
    env.sourcemark_config = make_dev_config(attribute_name="data-src")  # type: ignore[attr-defined]
    assert ("[[", "]]") in environment_delimiters(env)
    out = env.from_string('<a title="[[ t ]]">[[ "<i>" ]]</a>', globals={"t": "x>y"}).render()
    assert out == '<a data-src="&lt;template&gt;:1" title="x>y"><i></a>'


@mark_integration
def test_inactive_config_leaves_templates_alone() -> None:
    env = _env()
    env.sourcemark_config = make_config()  # type: ignore[attr-defined]
    assert env.from_string("<p>{{ 1 }}</p>").render() == "<p>1</p>"


@mark_integration
def test_filename_under_project_root_is_used(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    (root / "templates" / "shop").mkdir(parents=True)
    (root / "templates" / "shop" / "cart.html").write_text("<ul></ul>\n", encoding="utf-8")
    env = _env(loader=FileSystemLoader(str(root / "templates")))
    env.sourcemark_config = make_dev_config(  # type: ignore[attr-defined]
        attribute_name="data-src", project_root=root
    )
    out = env.get_template("shop/cart.html").render()
    assert out == '<ul data-src="templates/shop/cart.html:1"></ul>'


@mark_integration
def test_config_is_loaded_lazily_when_not_set(
    isolation: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(ENV_ENVIRONMENT, "development")
    env = _env()
    out = env.from_string("<p></p>", globals={}).render()
    assert out == '<p data-source-id="&lt;template&gt;:1"></p>'
