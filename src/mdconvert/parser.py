"""Two-pass Markdown parser producing a typed document tree.

Pass 1 feeds the source line by line through a ``BlockDriver``, which builds
a tree of block builders holding raw text. Pass 2 collects link reference
definitions from that tree and then builds the final nodes, running the
inline parser over each piece of text.

Inline parsing has to wait for pass 1 to finish because a reference
definition may appear after the links that use it.

Thread Safety:
- Parser produces an immutable tree (frozen dataclasses)
- Configuration is read from ContextVar (thread-local)
- Safe to share the resulting Document across threads

"""

from __future__ import annotations

from mdconvert.config import ParseConfig, get_parse_config
from mdconvert.nodes import Document
from mdconvert.parsing.blocks.build import BuildContext, collect_references
from mdconvert.parsing.blocks.driver import BlockDriver
from mdconvert.parsing.inline import InlineParser
from mdconvert.parsing.references import LinkReferences
from mdconvert.parsing.scanner import split_lines
from mdconvert.utils.logger import get_logger

logger = get_logger(__name__)


class Parser:
    """Markdown parser.

    Usage:
        >>> parser = Parser("# Hello\\n\\nWorld")
        >>> doc = parser.parse()
        >>> doc.children[0]
        Heading(level=1, children=(Str(content='Hello'),), ...)

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. Configuration is read from ContextVar (thread-local).

    """

    __slots__ = ("_references", "_source")

    def __init__(self, source: str) -> None:
        """Initialize parser with source text.

        Configuration is read from ContextVar, not passed as parameters.
        Use set_parse_config() or parse_config_context() before creating
        a Parser if you need non-default configuration.

        Args:
            source: Markdown source text

        """
        self._source = source
        self._references = LinkReferences()

    @property
    def _config(self) -> ParseConfig:
        """Get current parse configuration (thread-local)."""
        return get_parse_config()

    @property
    def references(self) -> LinkReferences:
        """Link reference definitions found by the last ``parse``."""
        return self._references

    def parse(self) -> Document:
        """Parse source into a Document.

        Returns:
            Document whose children are the top-level blocks
        """
        config = self._config
        lines = split_lines(self._source)

        driver = BlockDriver()
        for lineno, line in enumerate(lines):
            driver.feed(line, lineno)
        builders = driver.finish()

        if config.references_enabled:
            collect_references(builders, self._references)

        inline = InlineParser(self._references, strikethrough=config.strikethrough_enabled)
        blocks = BuildContext(inline, config).build_all(builders)

        logger.debug(
            "Parsed %d lines into %d blocks (%d link references)",
            len(lines),
            len(blocks),
            len(self._references),
        )
        return Document(blocks)
