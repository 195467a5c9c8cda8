"""Indented and fenced code blocks.

Code content is literal: it is never inline-parsed and keeps its own
indentation beyond what the block structure consumes.

CommonMark 4.4 / 4.5.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mdconvert.nodes import CodeBlock
from mdconvert.parsing.blocks import dispatch
from mdconvert.parsing.blocks.transitions import (
    BlockStart,
    Finished,
    Started,
    TextLine,
    Transition,
    Unchanged,
)
from mdconvert.parsing.scanner import CODE_INDENT

if TYPE_CHECKING:
    from mdconvert.parsing.blocks.build import BuildContext
    from mdconvert.parsing.scanner import Blank, LineScan

MIN_FENCE_LENGTH = 3


@dataclass(slots=True)
class IndentedCodeBuilder:
    """Lines indented 4+ columns.

    Blank lines are held back in ``pending`` until more code follows, so
    trailing blank lines never reach the output.
    """

    lines: list[str]
    pending: list[str] = field(default_factory=list)

    @classmethod
    def from_line(cls, line: LineScan) -> IndentedCodeBuilder:
        return cls([line.dedent(CODE_INDENT).full()])

    def next_line(self, line: LineScan) -> Transition:
        if line.indent < CODE_INDENT:
            return dispatch.close_and_start(line)
        self.lines.extend(self.pending)
        self.pending.clear()
        self.lines.append(line.dedent(CODE_INDENT).full())
        return Unchanged()

    def add_blank(self, blank: Blank) -> None:
        self.pending.append(" " * blank.dedent(CODE_INDENT).indent)

    def build(self, ctx: BuildContext) -> CodeBlock:
        return CodeBlock(code="\n".join(self.lines))


@dataclass(slots=True)
class FencedCodeBuilder:
    """Lines between an opening fence and a matching closing fence."""

    fence_char: str
    fence_length: int
    indent: int
    info: str
    lines: list[str] = field(default_factory=list)

    def next_line(self, line: LineScan) -> Transition:
        if self._is_closing_fence(line):
            return Finished()
        self.lines.append(line.dedent_capped(self.indent).full())
        return Unchanged()

    def add_blank(self, blank: Blank) -> None:
        self.lines.append(" " * blank.dedent(self.indent).indent)

    def _is_closing_fence(self, line: LineScan) -> bool:
        if line.indent >= CODE_INDENT or line.first != self.fence_char:
            return False
        length = _run_length(line.text, self.fence_char)
        return length >= self.fence_length and not line.text[length:].strip(" \t")

    def build(self, ctx: BuildContext) -> CodeBlock:
        words = self.info.split()
        classes = (ctx.unescape(words[0]),) if words else ()
        return CodeBlock(code="\n".join(self.lines), attr=("", classes, ()))


def check_fence(line: LineScan) -> BlockStart:
    """Recognize an opening fence: 3+ backticks or tildes plus an info string.

    A backtick fence may not have a backtick in its info string.
    """
    char = line.first
    length = _run_length(line.text, char)
    if length < MIN_FENCE_LENGTH:
        return TextLine(line)

    info = line.text[length:].strip()
    if char == "`" and "`" in info:
        return TextLine(line)

    return Started(
        FencedCodeBuilder(fence_char=char, fence_length=length, indent=line.indent, info=info)
    )


def _run_length(text: str, char: str) -> int:
    return len(text) - len(text.lstrip(char))
