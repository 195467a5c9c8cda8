"""One-line leaf blocks: ATX headings and thematic breaks.

Both are recognized and finished on the same line, so their builders only
hold what the second (inline) pass needs.

CommonMark 4.1 / 4.2.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mdconvert.nodes import Heading, ThematicBreak
from mdconvert.parsing.blocks.transitions import BlockStart, Completed, TextLine
from mdconvert.parsing.charsets import THEMATIC_BREAK_CHARS

if TYPE_CHECKING:
    from mdconvert.parsing.blocks.build import BuildContext
    from mdconvert.parsing.scanner import LineScan

MAX_HEADING_LEVEL = 6


@dataclass(slots=True)
class HeadingBuilder:
    """ATX or setext heading waiting for inline resolution."""

    level: int
    text: str

    def build(self, ctx: BuildContext) -> Heading:
        return ctx.heading(self.level, self.text)


@dataclass(slots=True)
class BreakBuilder:
    def build(self, ctx: BuildContext) -> ThematicBreak:
        return ThematicBreak()


def is_thematic_break(line: LineScan) -> bool:
    """Three or more of the same ``*``, ``-`` or ``_``, spaces and tabs allowed."""
    marker = line.first
    if marker not in THEMATIC_BREAK_CHARS:
        return False
    count = 0
    for char in line.text:
        if char == marker:
            count += 1
        elif char not in " \t":
            return False
    return count >= 3


def check_thematic_break(line: LineScan) -> BlockStart:
    if is_thematic_break(line):
        return Completed(BreakBuilder())
    return TextLine(line)


def check_atx_heading(line: LineScan) -> BlockStart:
    """Recognize ``# Heading`` (1-6 hashes, then a space, tab or end of line)."""
    text = line.text
    level = len(text) - len(text.lstrip("#"))
    if level > MAX_HEADING_LEVEL:
        return TextLine(line)

    after = text[level:]
    if after and after[0] not in " \t":
        return TextLine(line)

    return Completed(HeadingBuilder(level, _strip_closing_sequence(after)))


def _strip_closing_sequence(content: str) -> str:
    """Drop an optional closing ``#`` run and surrounding whitespace.

    The run only counts when it is preceded by a space or tab, or when it is
    the whole content.
    """
    content = content.strip(" \t")
    without = content.rstrip("#")
    if not without:
        return ""
    if without[-1] in " \t":
        return without.rstrip(" \t")
    return content
