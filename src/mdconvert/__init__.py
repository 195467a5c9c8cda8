"""
mdconvert: GitHub-Flavoured Markdown to Pandoc-style document trees

Parses Markdown into a typed, immutable tree shaped like the Pandoc AST and
writes it back out as Pandoc JSON, LaTeX or Typst. Zero runtime dependencies.

Quick Start:
    >>> from mdconvert import parse, convert
    >>> doc = parse("# Hello, World!")
    >>> doc.children[0].identifier
    'hello-world'
    >>> latex = convert("*hi*", to="latex")

    >>> # Or use the high-level Converter class
    >>> from mdconvert import Converter
    >>> to_typst = Converter(output="typst", tables=False)
    >>> typst = to_typst("**bold**")

Formats:
    Readers: markdown (gfm), json (native)
    Writers: latex, typst, json (native)
"""

from collections.abc import Iterable

from mdconvert.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from mdconvert.errors import MdConvertError, ReadError, RenderError, UnsupportedConstructError
from mdconvert.formats import get_writer, read, register_reader, register_writer, write
from mdconvert.nodes import (
    Alignment,
    Block,
    BlockQuote,
    BulletList,
    Cell,
    Code,
    CodeBlock,
    ColSpec,
    Document,
    Emph,
    Heading,
    Image,
    Inline,
    LineBreak,
    Link,
    ListAttributes,
    ListNumberDelim,
    ListNumberStyle,
    OrderedList,
    Paragraph,
    Plain,
    Row,
    SoftBreak,
    Space,
    Str,
    Strikeout,
    Strong,
    Table,
    TableBody,
    TableHead,
    ThematicBreak,
)
from mdconvert.parser import Parser
from mdconvert.renderers import DocumentWriter, LatexWriter, TypstWriter
from mdconvert.serialization import from_dict, from_json, to_dict, to_json

__version__ = "0.1.0"


def parse(source: str, *, config: ParseConfig | None = None) -> Document:
    """Parse Markdown source into a Document.

    Args:
        source: Markdown source text
        config: Configuration for this call only. When omitted, the
            configuration of the current context is used.

    Returns:
        Document root node

    Thread Safety:
        Safe to call from multiple threads; configuration lives in a
        ContextVar.

    """
    if config is None:
        return Parser(source).parse()
    with parse_config_context(config):
        return Parser(source).parse()


def convert(source: str, to: str = "json") -> str:
    """Parse Markdown and write it in the named output format.

    Raises:
        KeyError: If ``to`` is not a registered writer
        UnsupportedConstructError: If the writer cannot express the document

    """
    writer = get_writer(to)
    return writer(parse(source))


class Converter:
    """High-level converter combining a parse configuration and a writer.

    Usage:
        >>> to_latex = Converter(output="latex")
        >>> latex = to_latex("# Title")

        >>> # Access the tree
        >>> doc = Converter(auto_identifiers=False).parse("# Heading")
        >>> doc.children[0].identifier
        ''

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        Converter instances concurrently from different threads.

    """

    __slots__ = ("_config", "_output")

    def __init__(
        self,
        output: str = "json",
        *,
        tables: bool = True,
        strikethrough: bool = True,
        references: bool = True,
        auto_identifiers: bool = True,
    ) -> None:
        """Initialize converter.

        Args:
            output: Writer name used by ``__call__`` and ``write``
            tables: Recognize GFM pipe tables
            strikethrough: Recognize ~strike~ spans
            references: Resolve reference-style links
            auto_identifiers: Give headings generated identifiers

        Raises:
            KeyError: If ``output`` is not a registered writer

        """
        # Fail at construction rather than on first use
        get_writer(output)
        self._output = output

        # Build immutable config once (thread-safe, reused across calls)
        self._config = ParseConfig(
            tables_enabled=tables,
            strikethrough_enabled=strikethrough,
            references_enabled=references,
            auto_identifiers=auto_identifiers,
        )

    @property
    def config(self) -> ParseConfig:
        return self._config

    @property
    def output(self) -> str:
        return self._output

    def __call__(self, source: str) -> str:
        """Parse and write Markdown in one call."""
        return self.write(self.parse(source))

    def parse(self, source: str) -> Document:
        """Parse Markdown source into a Document.

        Thread Safety:
            Sets config via ContextVar (thread-local). Safe for concurrent use.

        """
        set_parse_config(self._config)
        try:
            return Parser(source).parse()
        finally:
            reset_parse_config()

    def parse_many(self, sources: Iterable[str]) -> list[Document]:
        """Parse multiple Markdown sources.

        Sets config once, parses all, resets once.

        Example:
            >>> docs = Converter().parse_many(["# Doc 1", "# Doc 2"])
            >>> len(docs)
            2

        """
        set_parse_config(self._config)
        try:
            return [Parser(source).parse() for source in sources]
        finally:
            reset_parse_config()

    def write(self, doc: Document) -> str:
        """Write a Document in this converter's output format."""
        return write(self._output, doc)


__all__ = [
    # Main API
    "parse",
    "convert",
    "Converter",
    "Parser",
    "read",
    "write",
    "register_reader",
    "register_writer",
    # Configuration
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Errors
    "MdConvertError",
    "ReadError",
    "RenderError",
    "UnsupportedConstructError",
    # Writers
    "DocumentWriter",
    "LatexWriter",
    "TypstWriter",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Nodes
    "Alignment",
    "Block",
    "BlockQuote",
    "BulletList",
    "Cell",
    "Code",
    "CodeBlock",
    "ColSpec",
    "Document",
    "Emph",
    "Heading",
    "Image",
    "Inline",
    "LineBreak",
    "Link",
    "ListAttributes",
    "ListNumberDelim",
    "ListNumberStyle",
    "OrderedList",
    "Paragraph",
    "Plain",
    "Row",
    "SoftBreak",
    "Space",
    "Str",
    "Strikeout",
    "Strong",
    "Table",
    "TableBody",
    "TableHead",
    "ThematicBreak",
]
