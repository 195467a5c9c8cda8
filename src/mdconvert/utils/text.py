"""Text processing utilities for mdconvert.

Example:
    >>> from mdconvert.utils.text import slugify
    >>> slugify("Hello World!")
    'hello-world'
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from mdconvert.nodes import (
    Cite,
    Code,
    Emph,
    Image,
    Inline,
    LineBreak,
    Link,
    Math,
    Quoted,
    RawInline,
    SmallCaps,
    SoftBreak,
    Space,
    Span,
    Str,
    Strikeout,
    Strong,
    Subscript,
    Superscript,
    Underline,
)

_NON_SLUG = re.compile(r"[^\w\- ]")


def slugify(text: str) -> str:
    """Convert heading text to a GitHub-style anchor.

    Lower-cases, drops punctuation other than ``-`` and ``_``, and turns each
    space into a hyphen. Unicode word characters are kept.

    Examples:
        >>> slugify("Hello World!")
        'hello-world'
        >>> slugify("Foo -- Bar")
        'foo----bar'
        >>> slugify("Café")
        'café'
    """
    return _NON_SLUG.sub("", text.strip().lower()).replace(" ", "-")


def stringify(inlines: Iterable[Inline]) -> str:
    """Flatten inline nodes to their plain text.

    Breaks and spaces become single spaces; formatting is dropped.
    """
    parts: list[str] = []
    for node in inlines:
        match node:
            case Str(content=content):
                parts.append(content)
            case Space() | SoftBreak() | LineBreak():
                parts.append(" ")
            case Code(code=code) | Math(content=code) | RawInline(content=code):
                parts.append(code)
            case (
                Emph(children=children)
                | Strong(children=children)
                | Strikeout(children=children)
                | Underline(children=children)
                | Superscript(children=children)
                | Subscript(children=children)
                | SmallCaps(children=children)
                | Quoted(children=children)
                | Cite(children=children)
                | Link(children=children)
                | Image(children=children)
                | Span(children=children)
            ):
                parts.append(stringify(children))
            case _:
                # Notes do not contribute to the surrounding text
                pass
    return "".join(parts)
