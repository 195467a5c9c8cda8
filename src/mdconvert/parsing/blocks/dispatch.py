"""Block-start classification.

``classify`` decides what a line would begin if it arrived with nothing open.
The first visible character selects the recognizers to try, in a fixed
priority order, so that ambiguous lines (``* * *`` is a thematic break, not a
list item) always resolve the same way.

Inside an open paragraph the rules tighten (``interrupting=True``): a list
item may only interrupt a paragraph when it has content, and an ordered item
only when it starts at 1.

Containers nest at most ``MAX_NESTING`` deep. Past that, ``>`` and list
markers are read as paragraph text.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdconvert.parsing.blocks import code, leaf, lists, paragraph, quote
from mdconvert.parsing.blocks.transitions import (
    BlockStart,
    Completed,
    Emitted,
    FinishedAndAlsoFinished,
    FinishedAndReplaced,
    Replaced,
    Started,
    TextLine,
    Transition,
)
from mdconvert.parsing.charsets import DIGITS
from mdconvert.parsing.scanner import CODE_INDENT

if TYPE_CHECKING:
    from mdconvert.parsing.scanner import LineScan

MAX_NESTING = 50


def classify(line: LineScan, *, interrupting: bool = False) -> BlockStart:
    """Recognize the block a line starts.

    Args:
        line: Line relative to the enclosing container
        interrupting: Apply the paragraph-interruption restrictions

    Returns:
        Started or Completed for block starts, TextLine for paragraph text.
    """
    if line.indent >= CODE_INDENT:
        if interrupting:
            return TextLine(line)
        return Started(code.IndentedCodeBuilder.from_line(line))

    match line.first:
        case "#":
            return leaf.check_atx_heading(line)
        case "_":
            return leaf.check_thematic_break(line)
        case "`" | "~":
            return code.check_fence(line)
        case "*" | "-" if leaf.is_thematic_break(line):
            return leaf.check_thematic_break(line)
        case _ if line.depth >= MAX_NESTING:
            return TextLine(line)
        case ">":
            return Started(quote.QuoteBuilder.from_line(line))
        case "*" | "-" | "+":
            return lists.check_item(line, interrupting=interrupting)
        case first if first in DIGITS:
            return lists.check_item(line, interrupting=interrupting)
        case _:
            return TextLine(line)


def begin(result: BlockStart) -> Transition:
    """Transition for a recognized line when nothing is open."""
    match result:
        case Started(block=block):
            return Replaced(block)
        case Completed(block=block):
            return Emitted(block)
        case TextLine(line=line):
            return Replaced(paragraph.ParagraphBuilder.from_line(line))


def interrupt(result: BlockStart) -> Transition:
    """Transition for a recognized line that closes the open block."""
    match result:
        case Started(block=block):
            return FinishedAndReplaced(block)
        case Completed(block=block):
            return FinishedAndAlsoFinished(block)
        case TextLine(line=line):
            return FinishedAndReplaced(paragraph.ParagraphBuilder.from_line(line))


def start_block(line: LineScan) -> Transition:
    """Classify a line arriving in an empty slot."""
    return begin(classify(line))


def close_and_start(line: LineScan) -> Transition:
    """Close the open block and classify the line afresh."""
    return interrupt(classify(line))
