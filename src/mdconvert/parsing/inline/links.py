"""Links and images: bracket matching, destinations, titles and reference lookup.

A ``[`` (or ``![``) opens a candidate. Its closing bracket is found with code
spans taken into account, then the text after it decides the form: ``(`` for
an inline destination, ``[label]`` / ``[]`` for full and collapsed references,
anything else for a shortcut reference. Destination and title scanning is
shared with link reference definitions.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from mdconvert.nodes import Image, Inline, Link
from mdconvert.parsing.charsets import ASCII_PUNCTUATION
from mdconvert.parsing.inline.entities import unescape

if TYPE_CHECKING:
    from mdconvert.parsing.references import LinkReferences


_WHITESPACE_PATTERN = re.compile(r"[ \t\n]+")

# Brackets nested deeper than this stay literal text
MAX_LINK_NESTING = 32


def _unescape_label(label: str) -> str:
    """Undo escaped backslashes and brackets; other escapes stay literal in labels."""
    return label.replace("\\\\", "\\").replace("\\[", "[").replace("\\]", "]")


def normalize_label(label: str) -> str:
    """Reduce a label to its lookup key: case-folded, with whitespace runs collapsed.

    Example:
        >>> normalize_label("  Foo\\n  BAR ")
        'foo bar'

    """
    unescaped = _unescape_label(label)
    normalized = _WHITESPACE_PATTERN.sub(" ", unescaped.strip())
    return normalized.casefold()


def parse_link_destination(text: str, pos: int) -> tuple[str, int] | None:
    """Scan a destination at ``pos``: ``<...>`` or a raw run with balanced parens.

    Returns:
        (unescaped url, position after it), or None when nothing valid is there.
    """
    text_len = len(text)
    while pos < text_len and text[pos] in " \t":
        pos += 1

    if pos >= text_len:
        return None

    # <...> form
    if text[pos] == "<":
        pos += 1
        start = pos
        while pos < text_len:
            char = text[pos]
            if char == ">":
                return unescape(text[start:pos]), pos + 1
            if char in "\n<":
                return None
            if char == "\\" and pos + 1 < text_len:
                pos += 2
                continue
            pos += 1
        return None

    # Raw form: no spaces, balanced parentheses
    start = pos
    paren_depth = 0

    while pos < text_len:
        char = text[pos]

        if char in " \t\n" or ord(char) < 0x20:
            break

        if char == "(":
            paren_depth += 1
        elif char == ")":
            if paren_depth == 0:
                break
            paren_depth -= 1
        elif char == "\\" and pos + 1 < text_len and text[pos + 1] in ASCII_PUNCTUATION:
            pos += 2
            continue

        pos += 1

    if paren_depth:
        return None
    return unescape(text[start:pos]), pos


def parse_link_title(text: str, pos: int) -> tuple[str | None, int]:
    """Scan a ``"..."``, ``'...'`` or ``(...)`` title at ``pos``, which may span lines.

    Returns:
        (title, end position), or (None, position of the opener or of
        the first non-space character) when there is no valid title.
    """
    text_len = len(text)
    while pos < text_len and text[pos] in " \t\n":
        pos += 1

    if pos >= text_len:
        return None, pos

    opener = text[pos]
    if opener not in "\"'(":
        return None, pos
    closer = ")" if opener == "(" else opener

    pos += 1
    start = pos
    while pos < text_len:
        char = text[pos]
        if char == closer:
            return unescape(text[start:pos]), pos + 1
        if opener == "(" and char == "(":
            # Unescaped parentheses cannot appear inside a (title)
            break
        if char == "\\" and pos + 1 < text_len:
            pos += 2
            continue
        pos += 1

    return None, start - 1


def _parse_inline_link(text: str, pos: int) -> tuple[str, str, int] | None:
    """Parse ``(url)`` / ``(url "title")`` starting at the ``(`` at ``pos``.

    Returns:
        (url, title, position after ``)``) or None.
    """
    text_len = len(text)
    if pos >= text_len or text[pos] != "(":
        return None

    pos += 1
    while pos < text_len and text[pos] in " \t\n":
        pos += 1

    if pos < text_len and text[pos] == ")":
        return "", "", pos + 1

    dest_result = parse_link_destination(text, pos)
    if dest_result is None:
        return None
    url, dest_end = dest_result

    pos = dest_end
    while pos < text_len and text[pos] in " \t\n":
        pos += 1

    if pos >= text_len:
        return None
    if text[pos] == ")":
        return url, "", pos + 1

    # A title must be separated from the destination by whitespace
    if pos == dest_end:
        return None
    title, pos = parse_link_title(text, pos)
    if title is None:
        return None

    while pos < text_len and text[pos] in " \t\n":
        pos += 1
    if pos >= text_len or text[pos] != ")":
        return None

    return url, title, pos + 1


def _find_closing_bracket(text: str, start: int) -> int:
    """Index of the ``]`` matching an already consumed ``[``, or -1.

    Brackets nest, and a ``]`` inside a code span does not count.
    """
    pos = start
    text_len = len(text)
    bracket_depth = 0

    while pos < text_len:
        char = text[pos]

        if char == "`":
            backtick_count = 0
            while pos < text_len and text[pos] == "`":
                backtick_count += 1
                pos += 1

            close_pos = pos
            while True:
                close_idx = text.find("`", close_pos)
                if close_idx == -1:
                    # Unclosed run: the backticks are plain text
                    break
                close_count = 0
                check_pos = close_idx
                while check_pos < text_len and text[check_pos] == "`":
                    close_count += 1
                    check_pos += 1
                if close_count == backtick_count:
                    pos = check_pos
                    break
                close_pos = check_pos
            continue

        if char == "[":
            bracket_depth += 1
        elif char == "]":
            if bracket_depth == 0:
                return pos
            bracket_depth -= 1
        elif char == "\\":
            pos += 2
            continue

        pos += 1

    return -1


def find_label_end(text: str, start: int) -> int:
    """Find the ] closing a reference label; labels may not nest brackets."""
    pos = start
    text_len = len(text)
    while pos < text_len:
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "[":
            return -1
        if char == "]":
            return pos
        pos += 1
    return -1


def _contains_link(children: tuple[Inline, ...]) -> bool:
    """Whether a link occurs anywhere below ``children``; links never nest."""
    for child in children:
        if isinstance(child, Link):
            return True
        nested = getattr(child, "children", None)
        if isinstance(nested, tuple) and _contains_link(nested):
            return True
    return False


class LinkParsingMixin:
    """Mixin for link and image parsing.

    Bracketed text is parsed once per distinct string: a rejected outer link
    leaves its inner candidates to be retried at the same level, and without
    the cache every nesting level would parse the same text twice.

    Required Host Attributes:
        - _references: LinkReferences
        - _bracket_cache: dict[str, tuple[Inline, ...]]
        - _bracket_depth: int

    Required Host Methods:
        - parse(text) -> tuple[Inline, ...]

    """

    _references: LinkReferences
    _bracket_cache: dict[str, tuple[Inline, ...]]
    _bracket_depth: int

    def _try_parse_link(self, text: str, pos: int) -> tuple[Link, int] | None:
        """Parse a link whose ``[`` is at ``pos``.

        Returns:
            (Link, position after it) or None, in which case ``[`` is literal.
        """
        if self._bracket_depth >= MAX_LINK_NESTING:
            return None
        bracket_pos = _find_closing_bracket(text, pos + 1)
        if bracket_pos == -1:
            return None

        target = self._resolve_target(text, pos + 1, bracket_pos)
        if target is None:
            return None
        url, title, end_pos = target

        children = self._parse_bracketed(text[pos + 1 : bracket_pos])
        if _contains_link(children):
            return None
        return Link(children, url, title), end_pos

    def _try_parse_image(self, text: str, pos: int) -> tuple[Image, int] | None:
        """Parse an image whose ``![`` is at ``pos``; alt text may hold links."""
        if self._bracket_depth >= MAX_LINK_NESTING:
            return None
        bracket_pos = _find_closing_bracket(text, pos + 2)
        if bracket_pos == -1:
            return None

        target = self._resolve_target(text, pos + 2, bracket_pos)
        if target is None:
            return None
        url, title, end_pos = target

        return Image(self._parse_bracketed(text[pos + 2 : bracket_pos]), url, title), end_pos

    def _parse_bracketed(self, label: str) -> tuple[Inline, ...]:
        cached = self._bracket_cache.get(label)
        if cached is None:
            self._bracket_depth += 1
            try:
                cached = self.parse(label)
            finally:
                self._bracket_depth -= 1
            self._bracket_cache[label] = cached
        return cached

    def _resolve_target(
        self, text: str, label_start: int, bracket_pos: int
    ) -> tuple[str, str, int] | None:
        """Find the destination following the bracketed text at ``bracket_pos``.

        Returns:
            (url, title, end_pos) or None if the brackets are not a link.
        """
        text_len = len(text)
        after = bracket_pos + 1
        next_char = text[after] if after < text_len else ""

        if next_char == "(":
            inline = _parse_inline_link(text, after)
            if inline is not None:
                return inline

        if next_char == "[":
            label_end = find_label_end(text, after + 1)
            if label_end == -1:
                return None
            label = text[after + 1 : label_end] or text[label_start:bracket_pos]
            found = self._references.get(label)
            if found is None:
                return None
            return found[0], found[1], label_end + 1

        # Shortcut reference: [ref] not followed by [] or a label
        found = self._references.get(text[label_start:bracket_pos])
        if found is None:
            return None
        return found[0], found[1], after

    def parse(self, text: str) -> tuple[Inline, ...]:
        """Provided by the core tokenizer mixin."""
        raise NotImplementedError
