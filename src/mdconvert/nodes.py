"""Typed document tree for mdconvert.

The tree mirrors the Pandoc AST so that documents can be exchanged with any
tool that speaks Pandoc's JSON. All nodes are frozen dataclasses with slots:

- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: finished trees are safe to share across threads
- Pattern matching: writers dispatch with ``match`` statements

Node Hierarchy:
Node (base)
├── Document
├── Block
│   ├── Plain, Paragraph, LineBlock
│   ├── CodeBlock, RawBlock
│   ├── BlockQuote, Div, Figure
│   ├── OrderedList, BulletList, DefinitionList
│   ├── Heading, ThematicBreak
│   └── Table (+ Caption, ColSpec, TableHead, TableBody, TableFoot, Row, Cell)
└── Inline
    ├── Str, Space, SoftBreak, LineBreak
    ├── Emph, Strong, Strikeout, Underline, Superscript, Subscript, SmallCaps
    ├── Quoted, Cite, Code, Math, RawInline
    ├── Link, Image, Note
    └── Span

The Markdown parser produces the common subset (text, emphasis, code,
links, images, headings, lists, quotes, code blocks, tables). The remaining
variants exist so that documents read from JSON can be represented; writers
may reject them with UnsupportedConstructError.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Pandoc attributes: identifier, classes, key/value pairs
type Attr = tuple[str, tuple[str, ...], tuple[tuple[str, str], ...]]

EMPTY_ATTR: Attr = ("", (), ())


# =============================================================================
# Enumerations (values are the Pandoc JSON constructor names)
# =============================================================================


class Alignment(Enum):
    """Table column alignment."""

    LEFT = "AlignLeft"
    RIGHT = "AlignRight"
    CENTER = "AlignCenter"
    DEFAULT = "AlignDefault"


class ListNumberStyle(Enum):
    DEFAULT = "DefaultStyle"
    EXAMPLE = "Example"
    DECIMAL = "Decimal"
    LOWER_ROMAN = "LowerRoman"
    UPPER_ROMAN = "UpperRoman"
    LOWER_ALPHA = "LowerAlpha"
    UPPER_ALPHA = "UpperAlpha"


class ListNumberDelim(Enum):
    DEFAULT = "DefaultDelim"
    PERIOD = "Period"
    ONE_PAREN = "OneParen"
    TWO_PARENS = "TwoParens"


class QuoteType(Enum):
    SINGLE = "SingleQuote"
    DOUBLE = "DoubleQuote"


class MathType(Enum):
    DISPLAY = "DisplayMath"
    INLINE = "InlineMath"


class CitationMode(Enum):
    AUTHOR_IN_TEXT = "AuthorInText"
    SUPPRESS_AUTHOR = "SuppressAuthor"
    NORMAL = "NormalCitation"


# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all tree nodes."""


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Str(Node):
    """A word of literal text (no spaces)."""

    content: str


@dataclass(frozen=True, slots=True)
class Space(Node):
    """Inter-word space."""


@dataclass(frozen=True, slots=True)
class SoftBreak(Node):
    """Soft line break (a newline inside a paragraph)."""


@dataclass(frozen=True, slots=True)
class LineBreak(Node):
    """Hard line break.

    Markdown: two trailing spaces or a trailing backslash
    """


@dataclass(frozen=True, slots=True)
class Emph(Node):
    """Emphasized text.

    Markdown: *text* or _text_
    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Strong(Node):
    """Strongly emphasized text.

    Markdown: **text** or __text__
    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Strikeout(Node):
    """Struck-out text.

    Markdown (GFM): ~text~ or ~~text~~
    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Underline(Node):
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Superscript(Node):
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Subscript(Node):
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class SmallCaps(Node):
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Quoted(Node):
    quote_type: QuoteType
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Citation:
    """A single citation inside a Cite node."""

    id: str
    prefix: tuple[Inline, ...] = ()
    suffix: tuple[Inline, ...] = ()
    mode: CitationMode = CitationMode.NORMAL
    note_num: int = 0
    hash: int = 0


@dataclass(frozen=True, slots=True)
class Cite(Node):
    citations: tuple[Citation, ...]
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Code(Node):
    """Inline code.

    Markdown: `code`
    """

    code: str
    attr: Attr = EMPTY_ATTR


@dataclass(frozen=True, slots=True)
class Math(Node):
    math_type: MathType
    content: str


@dataclass(frozen=True, slots=True)
class RawInline(Node):
    format: str
    content: str


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink.

    Markdown: [text](url "title") or [text][ref]
    """

    children: tuple[Inline, ...]
    url: str
    title: str = ""
    attr: Attr = EMPTY_ATTR


@dataclass(frozen=True, slots=True)
class Image(Node):
    """Image; children are the parsed alt text.

    Markdown: ![alt](url "title")
    """

    children: tuple[Inline, ...]
    url: str
    title: str = ""
    attr: Attr = EMPTY_ATTR


@dataclass(frozen=True, slots=True)
class Note(Node):
    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class Span(Node):
    children: tuple[Inline, ...]
    attr: Attr = EMPTY_ATTR


type Inline = (
    Str
    | Space
    | SoftBreak
    | LineBreak
    | Emph
    | Strong
    | Strikeout
    | Underline
    | Superscript
    | Subscript
    | SmallCaps
    | Quoted
    | Cite
    | Code
    | Math
    | RawInline
    | Link
    | Image
    | Note
    | Span
)


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Plain(Node):
    """Inline content not wrapped in a paragraph (tight list items, table cells)."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class LineBlock(Node):
    lines: tuple[tuple[Inline, ...], ...]


@dataclass(frozen=True, slots=True)
class CodeBlock(Node):
    """Literal code block, fenced or indented.

    The info string's first word (if any) is the single class in ``attr``.
    """

    code: str
    attr: Attr = EMPTY_ATTR

    @property
    def info(self) -> str:
        """Language tag, or "" when the block has none."""
        classes = self.attr[1]
        return classes[0] if classes else ""


@dataclass(frozen=True, slots=True)
class RawBlock(Node):
    format: str
    content: str


@dataclass(frozen=True, slots=True)
class BlockQuote(Node):
    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class ListAttributes:
    """Numbering of an ordered list."""

    start: int = 1
    style: ListNumberStyle = ListNumberStyle.DEFAULT
    delim: ListNumberDelim = ListNumberDelim.DEFAULT


def _items_are_tight(items: tuple[tuple[Block, ...], ...]) -> bool:
    return not any(isinstance(block, Paragraph) for item in items for block in item)


@dataclass(frozen=True, slots=True)
class OrderedList(Node):
    """Numbered list. Each item is a sequence of blocks."""

    items: tuple[tuple[Block, ...], ...]
    attributes: ListAttributes = ListAttributes()

    @property
    def tight(self) -> bool:
        """True when no item wraps its text in a Paragraph."""
        return _items_are_tight(self.items)


@dataclass(frozen=True, slots=True)
class BulletList(Node):
    """Bulleted list. Each item is a sequence of blocks."""

    items: tuple[tuple[Block, ...], ...]

    @property
    def tight(self) -> bool:
        """True when no item wraps its text in a Paragraph."""
        return _items_are_tight(self.items)


@dataclass(frozen=True, slots=True)
class DefinitionList(Node):
    """Terms, each with one or more definitions."""

    items: tuple[tuple[tuple[Inline, ...], tuple[tuple[Block, ...], ...]], ...]


@dataclass(frozen=True, slots=True)
class Heading(Node):
    """Section heading, level 1-6.

    ``attr`` holds the generated identifier. It does not take part in
    equality, so headings compare by level and content.
    """

    level: int
    children: tuple[Inline, ...]
    attr: Attr = field(default=EMPTY_ATTR, compare=False)

    @property
    def identifier(self) -> str:
        return self.attr[0]


@dataclass(frozen=True, slots=True)
class ThematicBreak(Node):
    """Horizontal rule.

    Markdown: ---, ***, ___
    """


@dataclass(frozen=True, slots=True)
class Caption:
    short: tuple[Inline, ...] | None = None
    children: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True)
class ColSpec:
    """Column alignment and relative width (None = default width)."""

    alignment: Alignment = Alignment.DEFAULT
    width: float | None = None


@dataclass(frozen=True, slots=True)
class Cell:
    """Table cell. Parsed cells hold ``(Plain(...),)`` or nothing."""

    children: tuple[Block, ...] = ()
    alignment: Alignment = Alignment.DEFAULT
    row_span: int = 1
    col_span: int = 1
    attr: Attr = EMPTY_ATTR


@dataclass(frozen=True, slots=True)
class Row:
    cells: tuple[Cell, ...]
    attr: Attr = EMPTY_ATTR


@dataclass(frozen=True, slots=True)
class TableHead:
    rows: tuple[Row, ...] = ()
    attr: Attr = EMPTY_ATTR


@dataclass(frozen=True, slots=True)
class TableBody:
    rows: tuple[Row, ...] = ()
    head: tuple[Row, ...] = ()
    row_head_columns: int = 0
    attr: Attr = EMPTY_ATTR


@dataclass(frozen=True, slots=True)
class TableFoot:
    rows: tuple[Row, ...] = ()
    attr: Attr = EMPTY_ATTR


@dataclass(frozen=True, slots=True)
class Table(Node):
    """GFM pipe table.

    Markdown:
        | a | b |
        |---|:-:|
        | 1 | 2 |
    """

    colspecs: tuple[ColSpec, ...]
    head: TableHead
    bodies: tuple[TableBody, ...]
    foot: TableFoot = TableFoot()
    caption: Caption = Caption()
    attr: Attr = EMPTY_ATTR

    @property
    def alignments(self) -> tuple[Alignment, ...]:
        return tuple(spec.alignment for spec in self.colspecs)

    @property
    def rows(self) -> tuple[Row, ...]:
        """All body rows, across bodies."""
        return tuple(row for body in self.bodies for row in body.rows)


@dataclass(frozen=True, slots=True)
class Figure(Node):
    children: tuple[Block, ...]
    caption: Caption = Caption()
    attr: Attr = EMPTY_ATTR


@dataclass(frozen=True, slots=True)
class Div(Node):
    children: tuple[Block, ...]
    attr: Attr = EMPTY_ATTR


type Block = (
    Plain
    | Paragraph
    | LineBlock
    | CodeBlock
    | RawBlock
    | BlockQuote
    | OrderedList
    | BulletList
    | DefinitionList
    | Heading
    | ThematicBreak
    | Table
    | Figure
    | Div
)


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root node.

    ``meta`` is an opaque mapping (Pandoc JSON metadata); the parser leaves it
    empty and never inspects it.
    """

    children: tuple[Block, ...]
    meta: dict[str, Any] = field(default_factory=dict)
