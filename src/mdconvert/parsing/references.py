"""Link reference definitions.

A definition is a paragraph-leading construct of the form

    [label]: destination "optional title"

Definitions are removed from the paragraph that holds them and collected
into a ``LinkReferences`` table. When two definitions share a label, the
first one in document order wins.

CommonMark 4.7.
"""

from __future__ import annotations

from mdconvert.parsing.inline.links import (
    find_label_end,
    normalize_label,
    parse_link_destination,
    parse_link_title,
)

# CommonMark: link labels are limited to 999 characters
MAX_LABEL_LENGTH = 999


class LinkReferences:
    """Table of link reference definitions keyed by normalized label.

    Example:
        >>> refs = LinkReferences()
        >>> refs.add("Foo", "/url", "")
        True
        >>> refs.get("FOO")
        ('/url', '')

    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, str]] = {}

    def add(self, label: str, url: str, title: str) -> bool:
        """Record a definition. Returns False if the label was already defined."""
        key = normalize_label(label)
        if not key or key in self._entries:
            return False
        self._entries[key] = (url, title)
        return True

    def get(self, label: str) -> tuple[str, str] | None:
        """Look up ``(url, title)`` for a label as written in the text."""
        return self._entries.get(normalize_label(label))

    def __contains__(self, label: str) -> bool:
        return normalize_label(label) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def extract_definitions(text: str, references: LinkReferences) -> str:
    """Strip leading definitions from paragraph text into ``references``.

    Returns:
        The remaining paragraph text (empty if it held only definitions).
    """
    pos = 0
    while pos < len(text):
        parsed = _parse_definition(text, pos)
        if parsed is None:
            break
        label, url, title, pos = parsed
        references.add(label, url, title)
    return text[pos:]


def _parse_definition(text: str, pos: int) -> tuple[str, str, str, int] | None:
    """Parse one definition at ``pos``.

    Returns:
        (label, url, title, position of the next line) or None.
    """
    text_len = len(text)
    if text[pos] != "[":
        return None

    label_end = find_label_end(text, pos + 1)
    if label_end == -1:
        return None
    label = text[pos + 1 : label_end]
    if not label.strip() or len(label) > MAX_LABEL_LENGTH:
        return None
    if label_end + 1 >= text_len or text[label_end + 1] != ":":
        return None

    dest_start = _skip_whitespace(text, label_end + 2)
    if dest_start >= text_len:
        return None
    dest = parse_link_destination(text, dest_start)
    if dest is None:
        return None
    url, dest_end = dest
    if dest_end == dest_start:
        return None

    # Without a title the definition must end its line
    plain_end = _line_end(text, dest_end)

    title_start = _skip_whitespace(text, dest_end)
    if title_start > dest_end and title_start < text_len:
        title, title_end = parse_link_title(text, title_start)
        if title is not None:
            end = _line_end(text, title_end)
            if end is not None:
                return label, url, title, end

    if plain_end is None:
        return None
    return label, url, "", plain_end


def _skip_whitespace(text: str, pos: int) -> int:
    """Skip spaces and tabs, and at most one line ending."""
    seen_newline = False
    while pos < len(text):
        char = text[pos]
        if char == "\n":
            if seen_newline:
                break
            seen_newline = True
        elif char not in " \t":
            break
        pos += 1
    return pos


def _line_end(text: str, pos: int) -> int | None:
    """Position after the line ending at ``pos``, if only whitespace remains."""
    while pos < len(text) and text[pos] in " \t":
        pos += 1
    if pos >= len(text):
        return pos
    if text[pos] == "\n":
        return pos + 1
    return None
