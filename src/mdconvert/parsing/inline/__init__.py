"""Inline parsing subsystem.

Provides mixins for parsing inline Markdown content:
- Emphasis and strong (*, _)
- Strikethrough (~, ~~)
- Code spans (`)
- Links and images, inline and by reference
- Backslash escapes, entity and numeric character references
- Soft and hard line breaks

Architecture:
Uses CommonMark delimiter stack algorithm for proper emphasis parsing.
See: https://spec.commonmark.org/0.31.2/#emphasis-and-strong-emphasis

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdconvert.parsing.inline.core import InlineParsingCoreMixin
from mdconvert.parsing.inline.emphasis import EmphasisMixin
from mdconvert.parsing.inline.links import LinkParsingMixin
from mdconvert.parsing.inline.tokens import (
    CodeSpanToken,
    DelimiterRun,
    HardBreakToken,
    InlineToken,
    NodeToken,
    SoftBreakToken,
    TextToken,
)

if TYPE_CHECKING:
    from mdconvert.nodes import Inline
    from mdconvert.parsing.references import LinkReferences


class InlineParser(
    InlineParsingCoreMixin,
    EmphasisMixin,
    LinkParsingMixin,
):
    """Combined inline parser.

    One instance serves a whole document: it carries the document's link
    reference definitions and the strikethrough switch.

    Usage:
        parser = InlineParser(references, strikethrough=True)
        inlines = parser.parse("**bold** and [a link](/url)")

    """

    __slots__ = ("_bracket_cache", "_bracket_depth", "_references", "_strikethrough")

    def __init__(self, references: LinkReferences, *, strikethrough: bool = True) -> None:
        self._references = references
        self._strikethrough = strikethrough
        self._bracket_cache: dict[str, tuple[Inline, ...]] = {}
        self._bracket_depth = 0


__all__ = [
    # Parser and mixins
    "InlineParser",
    "InlineParsingCoreMixin",
    "EmphasisMixin",
    "LinkParsingMixin",
    # Typed tokens
    "InlineToken",
    "DelimiterRun",
    "TextToken",
    "CodeSpanToken",
    "NodeToken",
    "HardBreakToken",
    "SoftBreakToken",
]
