"""Second pass: turning finished builders into document blocks.

Builders hold raw text. Once every line has been read (so that all link
reference definitions are known) the parser walks the builder tree twice:
``collect_references`` moves definitions out of paragraphs, then
``BuildContext.build_all`` produces the final nodes, running the inline parser
over each piece of text.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdconvert.nodes import Heading
from mdconvert.parsing.blocks import lists, paragraph, quote
from mdconvert.parsing.inline.entities import unescape
from mdconvert.utils.text import slugify, stringify

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mdconvert.config import ParseConfig
    from mdconvert.nodes import Block, Inline
    from mdconvert.parsing.blocks.transitions import BlockBuilder
    from mdconvert.parsing.inline import InlineParser
    from mdconvert.parsing.references import LinkReferences

# Identifier used when a heading's text has no slug characters
FALLBACK_IDENTIFIER = "section"


class BuildContext:
    """State shared by every builder while blocks are produced.

    Holds the inline parser and the set of heading identifiers already handed
    out, so duplicates get ``-1``, ``-2``... suffixes in document order.
    """

    __slots__ = ("_config", "_identifiers", "_inline")

    def __init__(self, inline: InlineParser, config: ParseConfig) -> None:
        self._inline = inline
        self._config = config
        self._identifiers: set[str] = set()

    def inlines(self, text: str) -> tuple[Inline, ...]:
        return self._inline.parse(text)

    def unescape(self, text: str) -> str:
        return unescape(text)

    def heading(self, level: int, text: str) -> Heading:
        children = self.inlines(text)
        if not self._config.auto_identifiers:
            return Heading(level, children)
        return Heading(level, children, attr=(self._identifier(children), (), ()))

    def build_all(self, builders: Iterable[BlockBuilder]) -> tuple[Block, ...]:
        """Build each builder, dropping those that produce nothing."""
        blocks = []
        for builder in builders:
            block = builder.build(self)
            if block is not None:
                blocks.append(block)
        return tuple(blocks)

    def _identifier(self, children: tuple[Inline, ...]) -> str:
        base = slugify(stringify(children)) or FALLBACK_IDENTIFIER
        identifier = base
        suffix = 0
        while identifier in self._identifiers:
            suffix += 1
            identifier = f"{base}-{suffix}"
        self._identifiers.add(identifier)
        return identifier


def collect_references(builders: Iterable[BlockBuilder], table: LinkReferences) -> None:
    """Extract link reference definitions from paragraphs, in document order."""
    for builder in builders:
        match builder:
            case paragraph.ParagraphBuilder():
                builder.extract_references(table)
            case quote.QuoteBuilder():
                collect_references(builder.driver.finish(), table)
            case lists.ListBuilder():
                for item in builder.items:
                    collect_references(item.driver.finish(), table)


__all__ = ["FALLBACK_IDENTIFIER", "BuildContext", "collect_references"]
