"""Block quotes.

A quote owns a nested driver. Lines carrying the ``>`` marker are fed to it
with the marker and one optional following space removed; lines without the
marker can only continue a paragraph lazily, anything else closes the quote.

CommonMark 5.1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mdconvert.nodes import BlockQuote
from mdconvert.parsing.blocks import driver as block_driver
from mdconvert.parsing.blocks.transitions import Transition, Unchanged
from mdconvert.parsing.scanner import CODE_INDENT, Blank, LineScan

if TYPE_CHECKING:
    from mdconvert.parsing.blocks.build import BuildContext


@dataclass(slots=True)
class QuoteBuilder:
    driver: block_driver.BlockDriver

    @classmethod
    def from_line(cls, line: LineScan) -> QuoteBuilder:
        builder = cls(block_driver.BlockDriver(line.depth + 1))
        builder._feed_marked(line)
        return builder

    def next_line(self, line: LineScan) -> Transition:
        if line.indent < CODE_INDENT and line.first == ">":
            self._feed_marked(line)
            return Unchanged()
        return self.driver.continuation(line)

    def _feed_marked(self, line: LineScan) -> None:
        match line.scan_rest():
            case Blank() as blank:
                self.driver.feed_blank(blank.dedent(1))
            case LineScan() as rest:
                self.driver.feed_line(rest.dedent_capped(1))

    def build(self, ctx: BuildContext) -> BlockQuote:
        return BlockQuote(ctx.build_all(self.driver.finish()))
