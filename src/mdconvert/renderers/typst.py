"""Typst writer.

Typst marks nesting with indentation, so list items push a prefix onto the
StringBuilder and every new line inside the item carries it.

Emphasis and strong emphasis toggle with a single ``_`` or ``*`` in Typst,
so a nested ``Emph`` inside ``Emph`` is written without its own markers.
"""

from __future__ import annotations

from mdconvert.errors import UnsupportedConstructError
from mdconvert.nodes import (
    Alignment,
    Block,
    BlockQuote,
    BulletList,
    Code,
    CodeBlock,
    Document,
    Emph,
    Heading,
    Image,
    Inline,
    LineBreak,
    Link,
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
    ThematicBreak,
)
from mdconvert.stringbuilder import StringBuilder
from mdconvert.utils.logger import get_logger

logger = get_logger(__name__)

FORMAT_NAME = "typst"

# Markup characters, plus the ones that start a construct at line start
SPECIAL_CHARS = frozenset("\\{}[]()#$%^*_&~`<>@=-+/")
_DIGITS = frozenset("0123456789")

_ALIGN = {
    Alignment.LEFT: "left",
    Alignment.RIGHT: "right",
    Alignment.CENTER: "center",
    Alignment.DEFAULT: "auto",
}


def escape_typst(text: str) -> str:
    """Escape markup characters and digits.

    Digits are escaped so that text such as ``1.`` never starts an
    enumeration.

    Example:
        >>> escape_typst("#1")
        '\\\\#\\\\1'

    """
    return "".join(f"\\{c}" if c in SPECIAL_CHARS or c in _DIGITS else c for c in text)


def typst_string(text: str) -> str:
    """Quote text as a Typst string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _longest_backtick_run(text: str) -> int:
    longest = current = 0
    for char in text:
        if char == "`":
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def _unsupported(construct: str) -> UnsupportedConstructError:
    logger.debug("Cannot write %s as %s", construct, FORMAT_NAME)
    return UnsupportedConstructError(construct, FORMAT_NAME)


class TypstWriter:
    """Render a document as Typst markup."""

    __slots__ = ()

    def write(self, doc: Document) -> str:
        sb = StringBuilder()
        self._write_blocks(doc.children, sb)
        return sb.build()

    def _write_blocks(self, blocks: tuple[Block, ...], sb: StringBuilder) -> None:
        for block in blocks:
            self._write_block(block, sb)

    def _write_block(self, block: Block, sb: StringBuilder) -> None:
        match block:
            case Plain(children=children):
                self._write_inlines(children, sb)
            case Paragraph(children=children):
                sb.newline()
                self._write_inlines(children, sb)
                sb.newline()
            case CodeBlock():
                self._write_code_block(block, sb)
            case BlockQuote(children=children):
                sb.newline().append("#quote(block: true)[")
                self._write_blocks(children, sb)
                sb.append("]").newline()
            case OrderedList():
                self._write_ordered_list(block, sb)
            case BulletList(items=items):
                sb.newline()
                for item in items:
                    sb.append("- ")
                    sb.push_prefix("  ")
                    self._write_blocks(item, sb)
                    sb.pop_prefix()
                    sb.newline()
                sb.newline()
            case Heading(level=level, children=children):
                sb.newline().append("=" * level + " ")
                self._write_inlines(children, sb)
                sb.newline()
            case ThematicBreak():
                sb.newline().append("#line(length: 100%)").newline()
            case Table():
                self._write_table(block, sb)
            case _:
                raise _unsupported(type(block).__name__)

    def _write_code_block(self, block: CodeBlock, sb: StringBuilder) -> None:
        fence = "`" * max(3, _longest_backtick_run(block.code) + 1)
        sb.newline().append(fence).append(block.info)
        for line in block.code.split("\n"):
            sb.newline().append(line)
        sb.newline().append(fence).newline()

    def _write_ordered_list(self, block: OrderedList, sb: StringBuilder) -> None:
        sb.newline()
        for number, item in enumerate(block.items, block.attributes.start):
            marker = f"{number}. "
            sb.append(marker)
            sb.push_prefix(" " * len(marker))
            self._write_blocks(item, sb)
            sb.pop_prefix()
            sb.newline()
        sb.newline()

    def _write_table(self, table: Table, sb: StringBuilder) -> None:
        size = len(table.colspecs)
        aligns = "".join(f"{_ALIGN[spec.alignment]}," for spec in table.colspecs)
        sb.newline().append("#table(").newline()
        sb.append(f"columns: {size},").newline()
        sb.append(f"align: (col, row) => ({aligns}).at(col),").newline()
        for row in (*table.head.rows, *table.rows):
            self._write_row(row, size, sb)
        sb.append(")").newline()

    def _write_row(self, row: Row, size: int, sb: StringBuilder) -> None:
        cells = row.cells[:size]
        for cell in cells:
            sb.append("[")
            match cell.children:
                case ():
                    pass
                case (Plain(children=children),):
                    self._write_inlines(children, sb)
                case _:
                    raise _unsupported("Table cell with nested blocks")
            sb.append("],").newline()
        # Typst fills cells in order, so short rows need padding
        for _ in range(size - len(cells)):
            sb.append("[],").newline()

    def _write_inlines(
        self,
        inlines: tuple[Inline, ...],
        sb: StringBuilder,
        in_emph: bool = False,
        in_strong: bool = False,
    ) -> None:
        for inline in inlines:
            self._write_inline(inline, sb, in_emph, in_strong)

    def _write_inline(self, inline: Inline, sb: StringBuilder, in_emph: bool, in_strong: bool) -> None:
        match inline:
            case Str(content=content):
                sb.append(escape_typst(content))
            case Space() | SoftBreak():
                sb.append(" ")
            case LineBreak():
                sb.append("\\").newline()
            case Emph(children=children):
                if in_emph:
                    self._write_inlines(children, sb, in_emph, in_strong)
                else:
                    sb.append("_")
                    self._write_inlines(children, sb, True, in_strong)
                    sb.append("_")
            case Strong(children=children):
                if in_strong:
                    self._write_inlines(children, sb, in_emph, in_strong)
                else:
                    sb.append("*")
                    self._write_inlines(children, sb, in_emph, True)
                    sb.append("*")
            case Strikeout(children=children):
                sb.append("#strike[")
                self._write_inlines(children, sb, in_emph, in_strong)
                sb.append("]")
            case Code(code=code):
                sb.append(f"#raw({typst_string(code)})")
            case Link(children=children, url=url):
                sb.append(f"#link({typst_string(url)})[")
                self._write_inlines(children, sb, in_emph, in_strong)
                sb.append("]")
            case Image(url=url):
                sb.append(f"#figure(image({typst_string(url)}, width: 100%))")
            case _:
                raise _unsupported(type(inline).__name__)
