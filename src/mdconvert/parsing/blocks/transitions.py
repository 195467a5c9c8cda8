"""Transition values returned by open blocks.

A block driver hands every line to its open block and gets back one of the
``Transition`` values below. Each one names exactly what the driver has to do,
so there is no partially-built "placeholder" state anywhere.

Recognizers (the functions that look at a line and decide whether it starts a
block) return a ``BlockStart`` instead; the dispatch module translates those
into transitions, depending on whether something was open.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mdconvert.parsing.blocks.code import FencedCodeBuilder, IndentedCodeBuilder
    from mdconvert.parsing.blocks.leaf import BreakBuilder, HeadingBuilder
    from mdconvert.parsing.blocks.lists import ListBuilder
    from mdconvert.parsing.blocks.paragraph import ParagraphBuilder
    from mdconvert.parsing.blocks.quote import QuoteBuilder
    from mdconvert.parsing.blocks.table import TableBuilder
    from mdconvert.parsing.scanner import LineScan

    type BlockBuilder = (
        ParagraphBuilder
        | HeadingBuilder
        | BreakBuilder
        | IndentedCodeBuilder
        | FencedCodeBuilder
        | TableBuilder
        | QuoteBuilder
        | ListBuilder
    )


# =============================================================================
# Transitions
# =============================================================================


@dataclass(frozen=True, slots=True)
class Unchanged:
    """The open block absorbed the line."""


@dataclass(frozen=True, slots=True)
class Replaced:
    """The open block (or empty slot) is replaced by ``block``."""

    block: BlockBuilder


@dataclass(frozen=True, slots=True)
class Finished:
    """The open block is complete; nothing is open afterwards."""


@dataclass(frozen=True, slots=True)
class Emitted:
    """Nothing was open and the line is a complete one-line block."""

    block: BlockBuilder


@dataclass(frozen=True, slots=True)
class FinishedAndReplaced:
    """The open block is complete and ``block`` opens on the same line."""

    block: BlockBuilder


@dataclass(frozen=True, slots=True)
class FinishedAndAlsoFinished:
    """The open block is complete and the line is a complete one-line block."""

    block: BlockBuilder


type Transition = (
    Unchanged | Replaced | Finished | Emitted | FinishedAndReplaced | FinishedAndAlsoFinished
)


# =============================================================================
# Recognizer results
# =============================================================================


@dataclass(frozen=True, slots=True)
class Started:
    """The line opens a multi-line block."""

    block: BlockBuilder


@dataclass(frozen=True, slots=True)
class Completed:
    """The line is a complete one-line block (heading, thematic break)."""

    block: BlockBuilder


@dataclass(frozen=True, slots=True)
class TextLine:
    """The line starts no block; it is paragraph text."""

    line: LineScan


type BlockStart = Started | Completed | TextLine

