"""Character sets for O(1) classification.

All sets are frozensets for O(1) membership testing and module-level caching.

Reference: CommonMark 0.31.2 specification, GFM 0.29
"""

import unicodedata

# CommonMark: ASCII punctuation characters
# https://spec.commonmark.org/0.31.2/#ascii-punctuation-character
ASCII_PUNCTUATION: frozenset[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


def is_unicode_punctuation(char: str) -> bool:
    """Check if character is Unicode punctuation (P* or S* categories).

    CommonMark uses Unicode punctuation categories for flanking rules.
    """
    if not char:
        return False
    if char in ASCII_PUNCTUATION:
        return True
    cat = unicodedata.category(char)
    return cat.startswith("P") or cat.startswith("S")


WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")


def is_unicode_whitespace(char: str) -> bool:
    """Check if character is Unicode whitespace.

    The empty string (start or end of text) counts as whitespace.
    """
    if not char:
        return True
    if char in WHITESPACE:
        return True
    return unicodedata.category(char) == "Zs"


# Characters that trigger tokenizer dispatch; "~" is only special when
# strikethrough is enabled
INLINE_SPECIAL: frozenset[str] = frozenset("*_`[!\\\n&")
INLINE_SPECIAL_STRIKE: frozenset[str] = INLINE_SPECIAL | frozenset("~")

BULLET_MARKERS: frozenset[str] = frozenset("-*+")

ORDERED_CLOSERS: frozenset[str] = frozenset(".)")

THEMATIC_BREAK_CHARS: frozenset[str] = frozenset("-*_")

DIGITS: frozenset[str] = frozenset("0123456789")

HEX_DIGITS: frozenset[str] = frozenset("0123456789abcdefABCDEF")
