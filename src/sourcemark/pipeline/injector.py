# topmark:header:start
#
#   project      : SourceMark
#   file         : injector.py
#   file_relpath : src/sourcemark/pipeline/injector.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tag injector: add the source attribute to one complete start tag.

The injector is fail-safe: anything that does not look like an opening tag,
tags that already carry the attribute, and void elements are returned
unchanged. For every other tag the attribute is inserted directly after the tag
name, ahead of the existing attributes, which keep their order and text.

Example:
    ```python
    inject_source_attribute('<div class="a">', "views/x.html:5", "data-src")
    # '<div data-src="views/x.html:5" class="a">'
    ```
"""

from __future__ import annotations

from html import escape

from sourcemark.config.logging import SourcemarkLogger, get_logger
from sourcemark.constants import VOID_ELEMENTS
from sourcemark.pipeline.outcomes import TagOutcome

logger: SourcemarkLogger = get_logger(__name__)

# Characters allowed after the first letter of a tag name. Includes ':' and '.'
# so namespaced (svg:rect) and dotted custom names are never split.
_NAME_EXTRA_CHARS: frozenset[str] = frozenset("_-:.")


def _is_ascii_letter(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _tag_name_end(tag_text: str) -> int | None:
    """Return the index just past the tag name, or None if not a start tag."""
    if len(tag_text) < 2 or tag_text[0] != "<" or not _is_ascii_letter(tag_text[1]):
        return None
    end: int = 2
    while end < len(tag_text) and (tag_text[end].isalnum() or tag_text[end] in _NAME_EXTRA_CHARS):
        end += 1
    return end


def tag_name_of(tag_text: str) -> str | None:
    """Return the element name of a start tag (original case), or None.

    Args:
        tag_text (str): Tag text starting with ``<``.

    Returns:
        str | None: The name, e.g. ``"div"`` for ``<div class="a">``.
    """
    end: int | None = _tag_name_end(tag_text)
    if end is None:
        return None
    return tag_text[1:end]


def classify_tag(tag_text: str, attribute_name: str) -> TagOutcome:
    """Decide what the injector will do with ``tag_text``.

    Args:
        tag_text (str): Complete start tag text, ``<`` through ``>``.
        attribute_name (str): Name of the source attribute.

    Returns:
        TagOutcome: ``ALREADY_MARKED`` when the attribute name occurs anywhere in
            the tag, ``MALFORMED`` when the text is not an opening tag, ``VOID``
            for void elements, otherwise ``INSTRUMENTED``.
    """
    if attribute_name in tag_text:
        return TagOutcome.ALREADY_MARKED
    name: str | None = tag_name_of(tag_text)
    if name is None:
        return TagOutcome.MALFORMED
    if name.lower() in VOID_ELEMENTS:
        return TagOutcome.VOID
    return TagOutcome.INSTRUMENTED


def inject_source_attribute(tag_text: str, locator: str, attribute_name: str) -> str:
    """Insert ``attribute_name="locator"`` right after the tag name.

    Args:
        tag_text (str): Complete start tag text, ``<`` through ``>`` (may span lines).
        locator (str): ``identifier:line`` locator; escaped for use in an attribute value.
        attribute_name (str): Name of the source attribute.

    Returns:
        str: The instrumented tag, or ``tag_text`` unchanged when the tag is
            skipped (see `classify_tag`).
    """
    outcome: TagOutcome = classify_tag(tag_text, attribute_name)
    if outcome is not TagOutcome.INSTRUMENTED:
        logger.trace("skip tag %.40r: %s", tag_text, outcome.value)
        return tag_text

    end: int | None = _tag_name_end(tag_text)
    if end is None:
        return tag_text
    return f'{tag_text[:end]} {attribute_name}="{escape(locator, quote=True)}"{tag_text[end:]}'
