# topmark:header:start
#
#   project      : SourceMark
#   file         : test_scanner.py
#   file_relpath : tests/pipeline/test_scanner.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the template scanner state machine.

Each test feeds a small template through `TemplateScanner.scan` and checks the
rebuilt text (and, where relevant, the per-tag statistics).
"""

from __future__ import annotations

from sourcemark.config.types import DirectiveSyntax, UnterminatedTagPolicy
from sourcemark.pipeline.outcomes import ScanReport, TagOutcome
from sourcemark.pipeline.scanner import TemplateScanner
from sourcemark.pipeline.state import iter_source_lines
from tests.conftest import mark_pipeline, parametrize


def scan(
    source: str,
    *,
    syntax: DirectiveSyntax = DirectiveSyntax.ERB,
    unterminated_tags: UnterminatedTagPolicy = UnterminatedTagPolicy.PASSTHROUGH,
    max_tag_lines: int = 0,
    identifier: str = "t",
) -> ScanReport:
    """Scan ``source`` with the ``data-src`` attribute."""
    scanner = TemplateScanner(
        template_identifier=identifier,
        attribute_name="data-src",
        delimiters=syntax.delimiters,
        unterminated_tags=unterminated_tags,
        max_tag_lines=max_tag_lines,
    )
    return scanner.scan(source)


@mark_pipeline
def test_tag_on_fifth_line_gets_its_line_number() -> None:
    source = "\n\n\n\n" + '<div class="a">Hi</div>\n'
    report = scan(source, identifier="views/x.html")
    assert report.text.splitlines()[4] == '<div data-src="views/x.html:5" class="a">Hi</div>'
    assert report.instrumented == 1


@mark_pipeline
def test_every_start_tag_on_a_line_is_instrumented() -> None:
    report = scan("<ul><li>a</li><li>b</li></ul>\n")
    assert report.text == (
        '<ul data-src="t:1"><li data-src="t:1">a</li><li data-src="t:1">b</li></ul>\n'
    )
    assert report.tag_counts[TagOutcome.INSTRUMENTED] == 3


@mark_pipeline
def test_void_and_marked_tags_pass_through() -> None:
    source = '<img src="a.png">\n<p data-src="x:1">t</p>\n'
    report = scan(source)
    assert report.text == source
    assert report.tag_counts[TagOutcome.VOID] == 1
    assert report.tag_counts[TagOutcome.ALREADY_MARKED] == 1
    assert report.instrumented == 0


@mark_pipeline
def test_gt_inside_quoted_value_does_not_end_tag() -> None:
    report = scan('<a title="a>b">x</a>')
    assert report.text == '<a data-src="t:1" title="a>b">x</a>'


@mark_pipeline
def test_end_tags_and_plain_angle_brackets_are_copied() -> None:
    source = "if a < b and c > d: </div> <3 <\n"
    assert scan(source).text == source


@mark_pipeline
def test_multiline_tag_uses_its_starting_line() -> None:
    source = 'x\n<div\n  class="a"\n  id="b">body\n</div>\n'
    report = scan(source)
    assert report.text == 'x\n<div data-src="t:2"\n  class="a"\n  id="b">body\n</div>\n'


@mark_pipeline
def test_text_before_multiline_tag_is_kept() -> None:
    assert scan("Hi <div\n>\n").text == 'Hi <div data-src="t:1"\n>\n'


@mark_pipeline
def test_rest_of_closing_line_is_copied_unscanned() -> None:
    """Tags that follow a multi-line tag on its closing line are not instrumented."""
    report = scan("<div\n><span>x</span>\n<b>\n")
    assert report.text == '<div data-src="t:1"\n><span>x</span>\n<b data-src="t:3">\n'
    assert report.instrumented == 2


@mark_pipeline
@parametrize(
    ("source", "syntax"),
    [
        ('<div\n  id="x"><!--\n<p>old</p>\n-->\n', DirectiveSyntax.ERB),
        ('<div\n  id="x"><% html = "\n<b>bold</b>" %>\n', DirectiveSyntax.ERB),
        ('<div\n  id="x">{#\n<p>\n#}\n', DirectiveSyntax.JINJA),
    ],
    ids=["html-comment", "erb-directive", "jinja-comment"],
)
def test_region_opened_after_multiline_tag_is_left_untouched(
    source: str, syntax: DirectiveSyntax
) -> None:
    report = scan(source, syntax=syntax)
    assert report.text == source.replace("<div", '<div data-src="t:1"', 1)
    assert report.instrumented == 1


@mark_pipeline
def test_region_closed_after_multiline_tag_resumes_plain_state() -> None:
    report = scan("<div\n><!-- a --><span>\n<p>\n")
    assert report.text == '<div data-src="t:1"\n><!-- a --><span>\n<p data-src="t:3">\n'


@mark_pipeline
def test_multiline_tag_with_gt_inside_quoted_value() -> None:
    source = '<a title="first\nx > y\nlast">z</a>\n'
    report = scan(source)
    assert report.text == '<a data-src="t:1" title="first\nx > y\nlast">z</a>\n'


@mark_pipeline
def test_erb_directives_are_left_untouched() -> None:
    source = '<% x = "<b>" if a > b %>\n<i><%= "<div>" %></i>\n'
    report = scan(source)
    assert report.text == '<% x = "<b>" if a > b %>\n<i data-src="t:2"><%= "<div>" %></i>\n'


@mark_pipeline
def test_directive_spanning_lines() -> None:
    source = "<% if x\n   <div> %>\n<p>\n"
    assert scan(source).text == '<% if x\n   <div> %>\n<p data-src="t:3">\n'


@mark_pipeline
def test_directive_embedded_in_tag() -> None:
    source = "<div <%= attrs(a > 1) %>>x</div>\n"
    assert scan(source).text == '<div data-src="t:1" <%= attrs(a > 1) %>>x</div>\n'


@mark_pipeline
def test_jinja_syntax() -> None:
    source = (
        "{% for i in items %}\n"
        '<li class="{{ cls }}">{{ "<b>" }}</li>\n'
        "{# <div> #}\n"
        "{% endfor %}\n"
    )
    report = scan(source, syntax=DirectiveSyntax.JINJA)
    assert report.text == (
        "{% for i in items %}\n"
        '<li data-src="t:2" class="{{ cls }}">{{ "<b>" }}</li>\n'
        "{# <div> #}\n"
        "{% endfor %}\n"
    )


@mark_pipeline
def test_erb_delimiters_are_markup_in_jinja_mode() -> None:
    """Without ERB delimiters ``<%`` is not a tag start either, so it is copied."""
    source = "<% x %><p>\n"
    assert scan(source, syntax=DirectiveSyntax.JINJA).text == '<% x %><p data-src="t:1">\n'


@mark_pipeline
def test_html_comments_are_left_untouched() -> None:
    source = "<!-- <div> -->\n<!--\n<p class='x'>\n-->\n<p>\n"
    report = scan(source)
    assert report.text == "<!-- <div> -->\n<!--\n<p class='x'>\n-->\n<p data-src=\"t:5\">\n"
    assert report.instrumented == 1


@mark_pipeline
def test_comment_opener_inside_directive_is_ignored() -> None:
    source = '<% s = "<!--" %><p>\n'
    assert scan(source).text == '<% s = "<!--" %><p data-src="t:1">\n'


@mark_pipeline
@parametrize("eol", ["\n", "\r\n"])
def test_line_endings_are_preserved(eol: str) -> None:
    source = f"<div>{eol}<p{eol}  id=a>{eol}end"
    report = scan(source)
    assert report.text == f'<div data-src="t:1">{eol}<p data-src="t:2"{eol}  id=a>{eol}end'


@mark_pipeline
def test_unicode_line_separators_do_not_count_as_lines() -> None:
    source = "a b\x0c<p>\n<i>\n"
    assert scan(source).text == 'a b\x0c<p data-src="t:1">\n<i data-src="t:2">\n'


@mark_pipeline
def test_unterminated_tag_passthrough_is_default() -> None:
    source = 'a\n<div class="x\nb\n'
    report = scan(source)
    assert report.text == source
    assert report.unterminated == 2
    assert report.is_lossy


@mark_pipeline
def test_unterminated_tag_can_be_dropped() -> None:
    report = scan("a\n<p>\n<div class=\"x\nb\n", unterminated_tags=UnterminatedTagPolicy.DROP)
    assert report.text == 'a\n<p data-src="t:2">\n'
    assert report.unterminated == 3


@mark_pipeline
def test_overlong_tag_is_flushed_uninstrumented() -> None:
    source = "<div\na\nb\nc>\n<p>\n"
    report = scan(source, max_tag_lines=2)
    assert report.text == '<div\na\nb\nc>\n<p data-src="t:5">\n'
    assert report.overflowed == [1]
    assert report.is_lossy


@mark_pipeline
def test_overlong_tag_tail_is_copied_through_unchanged() -> None:
    """Markup in the quoted values of an overflowed tag is never instrumented."""
    source = '<div\n  a\n  b\n  title="<b>x"\n  c>\n<p>\n'
    report = scan(source, max_tag_lines=2)
    assert report.text == '<div\n  a\n  b\n  title="<b>x"\n  c>\n<p data-src="t:6">\n'
    assert report.overflowed == [1]
    assert report.instrumented == 1


@mark_pipeline
def test_overlong_tag_never_closed_is_kept() -> None:
    report = scan('<div\na\nb\ntitle="<p>\n', max_tag_lines=1)
    assert report.text == '<div\na\nb\ntitle="<p>\n'
    assert report.overflowed == [1]
    assert report.instrumented == 0


@mark_pipeline
def test_tag_within_line_cap_is_instrumented() -> None:
    report = scan("<div\na\nb>\n", max_tag_lines=3)
    assert report.text == '<div data-src="t:1"\na\nb>\n'
    assert report.overflowed == []


@mark_pipeline
def test_empty_input() -> None:
    report = scan("")
    assert report.text == ""
    assert report.instrumented == 0
    assert not report.is_lossy


@mark_pipeline
def test_input_without_trailing_newline() -> None:
    assert scan("<p>x</p>").text == '<p data-src="t:1">x</p>'


@mark_pipeline
def test_scanner_instance_is_reusable() -> None:
    scanner = TemplateScanner(template_identifier="t", attribute_name="data-src")
    first = scanner.scan("<div\n")
    second = scanner.scan("<p>\n")
    assert first.unterminated == 1
    assert second.text == '<p data-src="t:1">\n'
    assert second.unterminated is None


@mark_pipeline
def test_iter_source_lines_keeps_endings() -> None:
    assert list(iter_source_lines("a\r\nb\n\nc")) == ["a\r\n", "b\n", "\n", "c"]
    assert list(iter_source_lines("")) == []
    assert list(iter_source_lines("x\n")) == ["x\n"]
