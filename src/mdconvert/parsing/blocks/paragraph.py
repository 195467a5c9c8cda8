"""Paragraphs, setext headings and the table hand-off.

A paragraph collects text lines until a blank line or an interrupting block
start. The line right after it may reinterpret the whole paragraph: a setext
underline turns it into a heading, and a GFM delimiter row turns its last line
into a table header.

CommonMark 4.3 / 4.8, GFM 4.10.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mdconvert.config import get_parse_config
from mdconvert.nodes import Block, Paragraph
from mdconvert.parsing import references
from mdconvert.parsing.blocks import dispatch, table
from mdconvert.parsing.blocks.transitions import (
    Finished,
    FinishedAndReplaced,
    Replaced,
    TextLine,
    Transition,
    Unchanged,
)
from mdconvert.parsing.scanner import CODE_INDENT

if TYPE_CHECKING:
    from mdconvert.parsing.blocks.build import BuildContext
    from mdconvert.parsing.references import LinkReferences
    from mdconvert.parsing.scanner import LineScan


@dataclass(slots=True)
class ParagraphBuilder:
    """Raw paragraph lines, leading whitespace already removed.

    Attributes:
        lines: Text lines in source order
        setext_level: 1 or 2 once an underline has been seen, else 0
        underline: The underline text (used when no content remains)

    """

    lines: list[str]
    setext_level: int = 0
    underline: str = ""

    @classmethod
    def from_line(cls, line: LineScan) -> ParagraphBuilder:
        return cls([line.text])

    def next_line(self, line: LineScan) -> Transition:
        """Handle a line inside the paragraph's own container."""
        if line.indent >= CODE_INDENT:
            self.lines.append(line.text)
            return Unchanged()

        if line.first in "=-" and _is_setext_underline(line):
            self.setext_level = 1 if line.first == "=" else 2
            self.underline = line.text.rstrip(" \t")
            return Finished()

        start = dispatch.classify(line, interrupting=True)
        if not isinstance(start, TextLine):
            return dispatch.interrupt(start)

        promoted = self._promote_to_table(line)
        if promoted is not None:
            return promoted

        self.lines.append(line.text)
        return Unchanged()

    def lazy_line(self, line: LineScan) -> Transition:
        """Handle a line that lacks the enclosing container's marker.

        The line continues the paragraph unless it starts a block of its own,
        in which case the container closes and that block begins.
        """
        if line.indent < CODE_INDENT:
            start = dispatch.classify(line)
            if not isinstance(start, TextLine):
                return dispatch.interrupt(start)
        self.lines.append(line.text)
        return Unchanged()

    def _promote_to_table(self, line: LineScan) -> Transition | None:
        if not get_parse_config().tables_enabled:
            return None
        header = self.lines[-1]
        alignments = table.parse_delimiter_row(line, table.header_column_count(header))
        if alignments is None:
            return None

        builder = table.TableBuilder.from_header(header, alignments)
        if len(self.lines) == 1:
            return Replaced(builder)
        self.lines.pop()
        return FinishedAndReplaced(builder)

    def extract_references(self, table_: LinkReferences) -> None:
        """Move leading link reference definitions into ``table_``."""
        rest = references.extract_definitions("\n".join(self.lines), table_)
        self.lines = rest.split("\n") if rest else []

    def build(self, ctx: BuildContext) -> Block | None:
        text = "\n".join(self.lines).rstrip(" \t")
        if self.setext_level:
            if not text:
                return Paragraph(ctx.inlines(self.underline))
            return ctx.heading(self.setext_level, text)
        if not text:
            return None
        return Paragraph(ctx.inlines(text))


def _is_setext_underline(line: LineScan) -> bool:
    """A run of one repeated ``=`` or ``-`` with only trailing whitespace."""
    body = line.text.rstrip(" \t")
    return body == line.first * len(body)
