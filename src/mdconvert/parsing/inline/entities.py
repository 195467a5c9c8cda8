"""Entity and numeric character references, and backslash escapes.

CommonMark 6.1 / 6.2. Named references must be terminated by ``;`` and be
one of the HTML5 named character references. Numeric references take 1-7
decimal or 1-6 hex digits; code point 0 and anything past U+10FFFF decode
to U+FFFD.

``unescape`` applies both escapes and references to text that is not
inline-parsed (link destinations and titles, code block info strings).
"""

from __future__ import annotations

import re
from html.entities import html5

from mdconvert.parsing.charsets import ASCII_PUNCTUATION, DIGITS, HEX_DIGITS

REPLACEMENT_CHAR = "\ufffd"
MAX_CODE_POINT = 0x10FFFF

# Longest HTML5 entity name is 31 characters
MAX_ENTITY_NAME = 32

_ESCAPE_OR_REFERENCE = re.compile(
    r"\\(.)|&(#[xX][0-9a-fA-F]{1,6};|#[0-9]{1,7};|[A-Za-z][A-Za-z0-9]{0,31};)",
    re.DOTALL,
)


def decode_entity(text: str, pos: int) -> tuple[str, int] | None:
    """Try to decode the reference starting at ``text[pos] == "&"``.

    Returns:
        Tuple of (decoded text, position after the ``;``), or None.
    """
    end = pos + 1
    text_len = len(text)
    if end >= text_len:
        return None

    if text[end] == "#":
        end += 1
        if end < text_len and text[end] in "xX":
            end += 1
            digits, base, max_digits = HEX_DIGITS, 16, 6
        else:
            digits, base, max_digits = DIGITS, 10, 7
        number_start = end
        while end < text_len and text[end] in digits:
            end += 1
        if not 1 <= end - number_start <= max_digits:
            return None
        if end >= text_len or text[end] != ";":
            return None
        return _code_point(int(text[number_start:end], base)), end + 1

    if not text[end].isascii() or not text[end].isalpha():
        return None
    max_end = min(pos + 1 + MAX_ENTITY_NAME, text_len)
    while end < max_end and text[end].isascii() and text[end].isalnum():
        end += 1
    if end >= text_len or text[end] != ";":
        return None
    decoded = html5.get(text[pos + 1 : end + 1])
    if decoded is None:
        return None
    return decoded, end + 1


def unescape(text: str) -> str:
    """Resolve backslash escapes and character references in ``text``.

    Example:
        >>> unescape(r"\\*not emphasis\\* &amp; &#35;")
        '*not emphasis* & #'

    """
    if "\\" not in text and "&" not in text:
        return text
    return _ESCAPE_OR_REFERENCE.sub(_replace, text)


def _replace(match: re.Match[str]) -> str:
    escaped = match.group(1)
    if escaped is not None:
        if escaped in ASCII_PUNCTUATION:
            return escaped
        return match.group(0)
    decoded = decode_entity(match.group(0), 0)
    return decoded[0] if decoded is not None else match.group(0)


def _code_point(value: int) -> str:
    if value == 0 or value > MAX_CODE_POINT or 0xD800 <= value <= 0xDFFF:
        return REPLACEMENT_CHAR
    return chr(value)
