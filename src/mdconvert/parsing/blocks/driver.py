"""Block driver: the line-by-line state machine for one container.

The document has a driver, and so does every block quote and list item. A
driver holds at most one open block plus the blocks already finished, feeds
each line to the open block (or classifies it when nothing is open) and
applies the resulting transition.

Containers talk to their nested driver through three entry points:

- ``feed_line`` for a line that carries the container's marker or indentation
- ``feed_blank`` for a blank line
- ``continuation`` for a line that lacks them. The nested driver answers
  ``Unchanged`` if a paragraph took the line lazily; any other transition is
  meant for the container's own parent, because the container is closing.

"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from mdconvert.parsing.blocks import code, dispatch, lists, paragraph, quote, table
from mdconvert.parsing.blocks.transitions import (
    Emitted,
    Finished,
    FinishedAndAlsoFinished,
    FinishedAndReplaced,
    Replaced,
    Transition,
    Unchanged,
)
from mdconvert.parsing.scanner import Blank, LineScan, scan

if TYPE_CHECKING:
    from mdconvert.parsing.blocks.transitions import BlockBuilder


class BlockDriver:
    """Open block, finished blocks and the bookkeeping for list looseness.

    Attributes:
        current: The open block, or None when nothing is open
        finished: Completed blocks in document order
        last_content_line: Line number of the last line consumed as content
        gap: Whether a blank line ever separated two blocks in this driver
        depth: Number of containers enclosing this driver

    """

    __slots__ = ("current", "depth", "finished", "gap", "last_content_line")

    def __init__(self, depth: int = 0) -> None:
        self.depth = depth
        self.current: BlockBuilder | None = None
        self.finished: list[BlockBuilder] = []
        self.last_content_line = -1
        self.gap = False

    def has_blocks(self) -> bool:
        return self.current is not None or bool(self.finished)

    def feed(self, text: str, lineno: int) -> None:
        """Feed one raw source line."""
        match scan(text, 0, lineno):
            case Blank() as blank:
                self.feed_blank(blank)
            case LineScan() as line:
                self.feed_line(line)

    def feed_line(self, line: LineScan) -> None:
        if line.depth != self.depth:
            line = replace(line, depth=self.depth)
        had_blocks = self.has_blocks()
        transition = self._next(line)
        if (
            had_blocks
            and self._opens_block(transition)
            and self.last_content_line < line.lineno - 1
        ):
            self.gap = True
        self._apply(transition)
        self.last_content_line = line.lineno

    def feed_blank(self, blank: Blank) -> bool:
        """Handle a blank line.

        Returns:
            True when the open block keeps the blank line as content.
        """
        match self.current:
            case None:
                return False
            case paragraph.ParagraphBuilder() | table.TableBuilder() | quote.QuoteBuilder():
                self._close()
                return False
            case code.IndentedCodeBuilder() as block:
                block.add_blank(blank)
                return False
            case code.FencedCodeBuilder() as block:
                block.add_blank(blank)
                self.last_content_line = blank.lineno
                return True
            case lists.ListBuilder() as block:
                kept = block.feed_blank(blank)
                if kept:
                    self.last_content_line = blank.lineno
                return kept
            case _:
                raise TypeError(f"{type(self.current).__name__} cannot stay open")

    def continuation(self, line: LineScan) -> Transition:
        """Offer a line lacking the enclosing container's marker."""
        match self.current:
            case paragraph.ParagraphBuilder() as block:
                transition = block.lazy_line(line)
            case quote.QuoteBuilder() as block:
                transition = block.driver.continuation(line)
            case lists.ListBuilder() as block:
                transition = block.continuation(line)
            case _:
                return dispatch.close_and_start(line)
        if isinstance(transition, Unchanged):
            self.last_content_line = line.lineno
        return transition

    def finish(self) -> list[BlockBuilder]:
        """Close the open block and return every block, in order.

        Calling it again returns the same list.
        """
        self._close()
        return self.finished

    def _next(self, line: LineScan) -> Transition:
        match self.current:
            case None:
                return dispatch.start_block(line)
            case (
                paragraph.ParagraphBuilder()
                | code.IndentedCodeBuilder()
                | code.FencedCodeBuilder()
                | table.TableBuilder()
                | quote.QuoteBuilder()
                | lists.ListBuilder()
            ) as block:
                return block.next_line(line)
            case _:
                raise TypeError(f"{type(self.current).__name__} cannot stay open")

    def _opens_block(self, transition: Transition) -> bool:
        match transition:
            case Replaced():
                return self.current is None
            case Emitted() | FinishedAndReplaced() | FinishedAndAlsoFinished():
                return True
            case _:
                return False

    def _apply(self, transition: Transition) -> None:
        match transition:
            case Unchanged():
                pass
            case Replaced(block=block):
                self.current = block
            case Finished():
                self._close()
            case Emitted(block=block):
                self.finished.append(block)
            case FinishedAndReplaced(block=block):
                self._close()
                self.current = block
            case FinishedAndAlsoFinished(block=block):
                self._close()
                self.finished.append(block)

    def _close(self) -> None:
        if self.current is not None:
            self.finished.append(self.current)
            self.current = None
