"""GFM pipe tables.

A table starts when a paragraph line is followed by a delimiter row with the
same number of columns. Body rows are then taken one per line until a blank
line or any line that starts another block.

    | a | b |
    |---|:-:|
    | 1 | 2 |

Rows are cut or padded to the header's column count. ``\\|`` puts a literal
pipe into a cell.

GFM 4.10.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mdconvert.nodes import (
    Alignment,
    Cell,
    ColSpec,
    Plain,
    Row,
    Table,
    TableBody,
    TableHead,
)
from mdconvert.parsing.blocks import dispatch
from mdconvert.parsing.blocks.transitions import TextLine, Transition, Unchanged
from mdconvert.parsing.scanner import CODE_INDENT

if TYPE_CHECKING:
    from mdconvert.parsing.blocks.build import BuildContext
    from mdconvert.parsing.scanner import LineScan

# (left colon, right colon) -> alignment
_ALIGNMENTS: dict[tuple[bool, bool], Alignment] = {
    (True, False): Alignment.LEFT,
    (False, True): Alignment.RIGHT,
    (True, True): Alignment.CENTER,
    (False, False): Alignment.DEFAULT,
}


@dataclass(slots=True)
class TableBuilder:
    """Header cells, alignments and body rows as raw cell text."""

    alignments: tuple[Alignment, ...]
    header: list[str]
    rows: list[list[str]] = field(default_factory=list)

    @classmethod
    def from_header(cls, header: str, alignments: tuple[Alignment, ...]) -> TableBuilder:
        return cls(alignments, split_row(header, len(alignments)))

    def next_line(self, line: LineScan) -> Transition:
        start = dispatch.classify(line)
        if not isinstance(start, TextLine):
            return dispatch.interrupt(start)
        self.rows.append(split_row(line.text, len(self.alignments)))
        return Unchanged()

    def build(self, ctx: BuildContext) -> Table:
        head = TableHead(rows=(self._row(ctx, self.header),))
        body = TableBody(rows=tuple(self._row(ctx, cells) for cells in self.rows))
        return Table(
            colspecs=tuple(ColSpec(alignment) for alignment in self.alignments),
            head=head,
            bodies=(body,),
        )

    @staticmethod
    def _row(ctx: BuildContext, cells: list[str]) -> Row:
        built = []
        for text in cells:
            inlines = ctx.inlines(text)
            built.append(Cell(children=(Plain(inlines),) if inlines else ()))
        return Row(cells=tuple(built))


def header_column_count(text: str) -> int:
    """Count the cells a header line would produce.

    One leading and one trailing unescaped pipe are ignored; a line that is
    only a pipe has no cells.
    """
    text = text.strip()
    if text == "|":
        return 0
    if text.startswith("|"):
        text = text[1:]
    if text.endswith("|") and not _is_escaped(text, len(text) - 1):
        text = text[:-1]
    return _count_pipes(text) + 1


def parse_delimiter_row(line: LineScan, columns: int) -> tuple[Alignment, ...] | None:
    """Read a delimiter row such as ``| :-- | :-: | --: |``.

    Returns:
        One alignment per column, or None unless the row has exactly
        ``columns`` cells of the form ``:?-+:?``.
    """
    if line.indent >= CODE_INDENT or columns == 0:
        return None

    text = line.text
    end = len(text)
    pos = 1 if text.startswith("|") else 0
    alignments: list[Alignment] = []

    for index in range(columns):
        pos = _skip_spaces(text, pos)
        left = pos < end and text[pos] == ":"
        if left:
            pos += 1
        dashes = pos
        while pos < end and text[pos] == "-":
            pos += 1
        if pos == dashes:
            return None
        right = pos < end and text[pos] == ":"
        if right:
            pos += 1
        pos = _skip_spaces(text, pos)
        if pos < end and text[pos] == "|":
            pos += 1
        elif index < columns - 1:
            return None
        alignments.append(_ALIGNMENTS[left, right])

    if _skip_spaces(text, pos) != end:
        return None
    return tuple(alignments)


def split_row(text: str, size: int) -> list[str]:
    """Split a row on unescaped pipes into exactly ``size`` trimmed cells.

    Example:
        >>> split_row("|aaa\\\\|aaa|", 2)
        ['aaa|aaa', '']

    """
    text = text.strip()
    if text.startswith("|"):
        text = text[1:]

    cells: list[str] = []
    current: list[str] = []
    pos = 0
    end = len(text)
    while pos < end and len(cells) < size:
        char = text[pos]
        if char == "\\" and pos + 1 < end and text[pos + 1] == "|":
            current.append("|")
            pos += 2
            continue
        if char == "|":
            cells.append("".join(current))
            current = []
        else:
            current.append(char)
        pos += 1

    if len(cells) < size:
        cells.append("".join(current))
    cells = [cell.strip() for cell in cells]
    cells.extend("" for _ in range(size - len(cells)))
    return cells


def _count_pipes(text: str) -> int:
    count = 0
    pos = 0
    while pos < len(text):
        if text[pos] == "\\":
            pos += 2
            continue
        if text[pos] == "|":
            count += 1
        pos += 1
    return count


def _is_escaped(text: str, pos: int) -> bool:
    backslashes = 0
    while pos > 0 and text[pos - 1] == "\\":
        backslashes += 1
        pos -= 1
    return backslashes % 2 == 1


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in " \t":
        pos += 1
    return pos
