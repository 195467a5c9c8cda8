"""Typed inline tokens for the inline parser.

Tokenization turns inline text into a flat list of these tokens. Emphasis
resolution then rewrites that list in place, replacing the span between a
matched opener and closer with a single ``NodeToken``.

Plain tokens are NamedTuples. Delimiter runs are the exception: matching
consumes characters from them, so they are small mutable objects compared by
identity.

Usage:
    from mdconvert.parsing.inline.tokens import DelimiterRun, TextToken

    match token:
        case DelimiterRun(char="*", length=length):
            print(f"Asterisk run with {length} characters left")
        case TextToken(content=content):
            print(content)

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, NamedTuple

if TYPE_CHECKING:
    from mdconvert.nodes import Inline

# PEP 695 type alias for delimiter characters
type DelimiterChar = Literal["*", "_", "~"]


@dataclass(slots=True, eq=False)
class DelimiterRun:
    """A run of ``*``, ``_`` or ``~`` characters on the delimiter stack.

    Attributes:
        char: The delimiter character
        length: Characters not yet consumed by a match
        original: Length of the run as written (used by the rule of 3)
        can_open: Whether the run may open emphasis
        can_close: Whether the run may close emphasis
        start: Offset of the first unconsumed character in the source text
        end: Offset just past the last unconsumed character

    Openers are consumed from their inner (right) edge and closers from their
    inner (left) edge; ``start``/``end`` move accordingly.
    """

    char: DelimiterChar
    length: int
    original: int
    can_open: bool
    can_close: bool
    start: int
    end: int

    def consume_as_opener(self, count: int) -> None:
        self.length -= count
        self.end -= count

    def consume_as_closer(self, count: int) -> None:
        self.length -= count
        self.start += count


class TextToken(NamedTuple):
    """Plain text token.

    Attributes:
        content: The text content.

    """

    content: str


class CodeSpanToken(NamedTuple):
    """Inline code span token.

    Attributes:
        code: The code content (already processed per CommonMark rules).

    """

    code: str


class NodeToken(NamedTuple):
    """Pre-parsed node token (links, images, resolved emphasis).

    Attributes:
        node: The inline node.

    """

    node: Inline


class HardBreakToken(NamedTuple):
    """Hard line break (backslash + newline or two trailing spaces)."""


class SoftBreakToken(NamedTuple):
    """Soft line break (single newline in a paragraph)."""


# PEP 695 type alias for all inline tokens
type InlineToken = (
    DelimiterRun | TextToken | CodeSpanToken | NodeToken | HardBreakToken | SoftBreakToken
)


__all__ = [
    "CodeSpanToken",
    "DelimiterChar",
    "DelimiterRun",
    "HardBreakToken",
    "InlineToken",
    "NodeToken",
    "SoftBreakToken",
    "TextToken",
]
