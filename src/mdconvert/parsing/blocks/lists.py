"""Bullet and ordered lists.

Each item owns a nested driver and a content column: the column its first
content character sits at. Lines indented at least that far belong to the
item; a marker of the same family at a lesser indent starts a sibling item;
anything else either continues a paragraph lazily or ends the list.

Looseness is decided from line numbers. A list is loose when a blank line
separates two of its items, or two blocks directly inside one item. Blank
lines absorbed by fenced code do not count because the fence reports them as
content.

CommonMark 5.2 / 5.3.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mdconvert.nodes import (
    BulletList,
    ListAttributes,
    ListNumberDelim,
    ListNumberStyle,
    OrderedList,
    Paragraph,
    Plain,
)
from mdconvert.parsing.blocks import dispatch, leaf
from mdconvert.parsing.blocks import driver as block_driver
from mdconvert.parsing.blocks.transitions import (
    BlockStart,
    FinishedAndAlsoFinished,
    Started,
    TextLine,
    Transition,
    Unchanged,
)
from mdconvert.parsing.charsets import BULLET_MARKERS, DIGITS, ORDERED_CLOSERS
from mdconvert.parsing.scanner import CODE_INDENT, Blank, LineScan

if TYPE_CHECKING:
    from mdconvert.nodes import Block
    from mdconvert.parsing.blocks.build import BuildContext

# Ordered list numbers are limited to nine digits
MAX_ORDERED_DIGITS = 9

# Content indented further than this after the marker is indented code
MAX_MARKER_GAP = 4

_DELIMS: dict[str, ListNumberDelim] = {
    ".": ListNumberDelim.PERIOD,
    ")": ListNumberDelim.ONE_PAREN,
}


@dataclass(frozen=True, slots=True)
class ListMarker:
    """A list item marker.

    Attributes:
        char: Bullet character, or the ``.``/``)`` closing an ordered number
        width: Columns the marker occupies
        ordered: Whether this is an ordered marker
        start: The number of an ordered marker

    """

    char: str
    width: int
    ordered: bool = False
    start: int = 1

    def same_family(self, other: ListMarker) -> bool:
        """Items continue a list only with the same bullet or delimiter."""
        return self.ordered == other.ordered and self.char == other.char


@dataclass(frozen=True, slots=True)
class ItemStart:
    """Where an item's content begins, measured from its container."""

    marker: ListMarker
    content: LineScan | Blank
    content_column: int


@dataclass(slots=True)
class ItemBuilder:
    driver: block_driver.BlockDriver
    content_column: int
    marker_line: int
    closed: bool = False

    @property
    def last_line(self) -> int:
        return max(self.marker_line, self.driver.last_content_line)

    def is_empty(self) -> bool:
        return not self.driver.has_blocks()


@dataclass(slots=True)
class ListBuilder:
    marker: ListMarker
    items: list[ItemBuilder] = field(default_factory=list)
    loose: bool = False

    @classmethod
    def from_item(cls, line: LineScan, start: ItemStart) -> ListBuilder:
        builder = cls(start.marker)
        builder._add_item(line, start)
        return builder

    def next_line(self, line: LineScan) -> Transition:
        item = self.items[-1]
        if not item.closed and line.indent >= item.content_column:
            item.driver.feed_line(line.dedent(item.content_column))
            return Unchanged()

        if line.indent < CODE_INDENT:
            if leaf.is_thematic_break(line):
                return FinishedAndAlsoFinished(leaf.BreakBuilder())
            start = parse_item_start(line)
            if start is not None and start.marker.same_family(self.marker):
                if item.last_line < line.lineno - 1:
                    self.loose = True
                self._add_item(line, start)
                return Unchanged()

        return self.continuation(line)

    def continuation(self, line: LineScan) -> Transition:
        """Offer a line that belongs to no item to the innermost paragraph."""
        item = self.items[-1]
        if item.closed:
            return dispatch.close_and_start(line)
        return item.driver.continuation(line)

    def feed_blank(self, blank: Blank) -> bool:
        """Pass a blank line to the open item.

        Returns:
            True when the blank line is content of the item (inside fenced code).
        """
        item = self.items[-1]
        if item.closed:
            return False
        if item.is_empty():
            # An item may begin with at most one blank line
            item.closed = True
            return False
        return item.driver.feed_blank(blank.dedent(item.content_column))

    def _add_item(self, line: LineScan, start: ItemStart) -> None:
        item = ItemBuilder(
            driver=block_driver.BlockDriver(line.depth + 1),
            content_column=start.content_column,
            marker_line=line.lineno,
        )
        if isinstance(start.content, LineScan):
            item.driver.feed_line(start.content)
        self.items.append(item)

    @property
    def is_loose(self) -> bool:
        return self.loose or any(item.driver.gap for item in self.items)

    def build(self, ctx: BuildContext) -> OrderedList | BulletList:
        tight = not self.is_loose
        items: list[tuple[Block, ...]] = []
        for item in self.items:
            blocks = ctx.build_all(item.driver.finish())
            if tight:
                blocks = tuple(
                    Plain(block.children) if isinstance(block, Paragraph) else block
                    for block in blocks
                )
            items.append(blocks)

        if not self.marker.ordered:
            return BulletList(tuple(items))
        attributes = ListAttributes(
            start=self.marker.start,
            style=ListNumberStyle.DECIMAL,
            delim=_DELIMS[self.marker.char],
        )
        return OrderedList(tuple(items), attributes)


def parse_item_start(line: LineScan) -> ItemStart | None:
    """Recognize a bullet or ordered marker followed by a space, tab or end of line."""
    if line.first in BULLET_MARKERS:
        marker = ListMarker(char=line.first, width=1)
    elif line.first in DIGITS:
        digits = len(line.text) - len(line.text.lstrip("0123456789"))
        if digits > MAX_ORDERED_DIGITS or line.text[digits:digits + 1] not in ORDERED_CLOSERS:
            return None
        marker = ListMarker(
            char=line.text[digits],
            width=digits + 1,
            ordered=True,
            start=int(line.text[:digits]),
        )
    else:
        return None

    marker_end = line.indent + marker.width
    match line.advance(marker.width):
        case Blank() as blank:
            return ItemStart(marker, blank, marker_end + 1)
        case LineScan(indent=0):
            return None
        case LineScan() as rest if rest.indent > MAX_MARKER_GAP:
            return ItemStart(marker, rest.dedent(1), marker_end + 1)
        case LineScan() as rest:
            return ItemStart(marker, rest.dedent(rest.indent), marker_end + rest.indent)


def check_item(line: LineScan, *, interrupting: bool = False) -> BlockStart:
    """Recognize a list item, which opens a new list."""
    start = parse_item_start(line)
    if start is None:
        return TextLine(line)
    if interrupting:
        # Only non-empty items, and ordered ones starting at 1, interrupt a paragraph
        if isinstance(start.content, Blank):
            return TextLine(line)
        if start.marker.ordered and start.marker.start != 1:
            return TextLine(line)
    return Started(ListBuilder.from_item(line, start))
