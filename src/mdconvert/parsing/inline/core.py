"""Inline tokenizer and node assembly.

The tokenizer walks the text once and emits a flat token list: literal text,
code spans, breaks, delimiter runs and finished link/image nodes. After the
emphasis pass has collapsed matched runs, assembly merges adjacent text and
splits it into ``Str`` words and ``Space`` runs.

Thread Safety:
No state survives a ``parse`` call, so a parser may be reused but not shared
between threads while a call is running.

"""

from __future__ import annotations

import re

from mdconvert.nodes import (
    Code,
    Inline,
    LineBreak,
    SoftBreak,
    Space,
    Str,
)
from mdconvert.parsing.charsets import (
    ASCII_PUNCTUATION,
    INLINE_SPECIAL,
    INLINE_SPECIAL_STRIKE,
)
from mdconvert.parsing.inline.entities import decode_entity
from mdconvert.parsing.inline.tokens import (
    CodeSpanToken,
    DelimiterRun,
    HardBreakToken,
    InlineToken,
    NodeToken,
    SoftBreakToken,
    TextToken,
)

# Strikethrough runs longer than this are literal tildes
MAX_TILDE_RUN = 2

_WORDS_AND_SPACES = re.compile(r"[ \t]+|[^ \t]+")


class InlineParsingCoreMixin:
    """Tokenizer and assembler for inline text.

    Required Host Attributes:
        - _strikethrough: bool

    Required Host Methods (from other mixins):
        - _delimiter_run(text, start, end) -> DelimiterRun
        - _process_emphasis(tokens) -> None
        - _try_parse_link(text, pos) -> tuple | None
        - _try_parse_image(text, pos) -> tuple | None

    """

    _strikethrough: bool

    def parse(self, text: str) -> tuple[Inline, ...]:
        """Parse a run of inline text into nodes.

        Example:
            >>> parser.parse("*hi* there")
            (Emph(children=(Str(content='hi'),)), Space(), Str(content='there'))

        """
        if not text:
            return ()

        # Phase 1: flat token list
        tokens = self._tokenize(text)

        # Phase 2: Match delimiters, collapsing emphasis spans in place
        self._process_emphasis(tokens)

        # Phase 3: Build nodes from what is left
        return self._assemble(tokens)

    def _tokenize(self, text: str) -> list[InlineToken]:
        """Tokenize inline content into typed token objects."""
        tokens: list[InlineToken] = []
        pos = 0
        text_len = len(text)
        tokens_append = tokens.append
        special = INLINE_SPECIAL_STRIKE if self._strikethrough else INLINE_SPECIAL

        while pos < text_len:
            char = text[pos]

            # Code spans bind tighter than every delimiter
            if char == "`":
                count = 0
                while pos < text_len and text[pos] == "`":
                    count += 1
                    pos += 1

                close_pos = self._find_code_span_close(text, pos, count)
                if close_pos != -1:
                    code = text[pos:close_pos]
                    code = code.replace("\n", " ")
                    # One space comes off each end, unless the span is only spaces
                    if len(code) >= 2 and code[0] == " " and code[-1] == " " and code.strip(" "):
                        code = code[1:-1]
                    tokens_append(CodeSpanToken(code=code))
                    pos = close_pos + count
                else:
                    tokens_append(TextToken(content="`" * count))
                continue

            # Emphasis delimiters: * or _, and ~ when strikethrough is on
            if char in "*_" or (char == "~" and self._strikethrough):
                start = pos
                while pos < text_len and text[pos] == char:
                    pos += 1
                if char == "~" and pos - start > MAX_TILDE_RUN:
                    tokens_append(TextToken(content=text[start:pos]))
                else:
                    tokens_append(self._delimiter_run(text, start, pos))
                continue

            # Links; a failed bracket is plain text
            if char == "[":
                link_result = self._try_parse_link(text, pos)
                if link_result:
                    node, pos = link_result
                    tokens_append(NodeToken(node=node))
                    continue
                tokens_append(TextToken(content="["))
                pos += 1
                continue

            # Images
            if char == "!":
                if pos + 1 < text_len and text[pos + 1] == "[":
                    img_result = self._try_parse_image(text, pos)
                    if img_result:
                        node, pos = img_result
                        tokens_append(NodeToken(node=node))
                        continue
                tokens_append(TextToken(content="!"))
                pos += 1
                continue

            # Backslash before a line ending
            if char == "\\" and pos + 1 < text_len and text[pos + 1] == "\n":
                tokens_append(HardBreakToken())
                pos = self._skip_leading_spaces(text, pos + 2)
                continue

            # Line ending
            if char == "\n":
                space_count = 0
                check_pos = pos - 1
                while check_pos >= 0 and text[check_pos] == " ":
                    space_count += 1
                    check_pos -= 1

                if space_count:
                    self._strip_trailing_spaces(tokens)
                # Two or more trailing spaces make it hard
                tokens_append(HardBreakToken() if space_count >= 2 else SoftBreakToken())
                pos = self._skip_leading_spaces(text, pos + 1)
                continue

            # Escaped character
            if char == "\\":
                if pos + 1 < text_len and text[pos + 1] in ASCII_PUNCTUATION:
                    tokens_append(TextToken(content=text[pos + 1]))
                    pos += 2
                else:
                    tokens_append(TextToken(content="\\"))
                    pos += 1
                continue

            # Entities
            if char == "&":
                entity_result = decode_entity(text, pos)
                if entity_result:
                    decoded, pos = entity_result
                    tokens_append(TextToken(content=decoded))
                    continue
                tokens_append(TextToken(content="&"))
                pos += 1
                continue

            # Plain text up to the next special character
            text_start = pos
            pos += 1
            while pos < text_len and text[pos] not in special:
                pos += 1
            tokens_append(TextToken(content=text[text_start:pos]))

        return tokens

    def _find_code_span_close(self, text: str, start: int, backtick_count: int) -> int:
        """Start of the next backtick run of exactly ``backtick_count``, or -1."""
        pos = start
        text_len = len(text)
        while True:
            idx = text.find("`", pos)
            if idx == -1:
                return -1
            count = 0
            check_pos = idx
            while check_pos < text_len and text[check_pos] == "`":
                count += 1
                check_pos += 1
            if count == backtick_count:
                return idx
            pos = check_pos

    @staticmethod
    def _skip_leading_spaces(text: str, pos: int) -> int:
        while pos < len(text) and text[pos] in " \t":
            pos += 1
        return pos

    @staticmethod
    def _strip_trailing_spaces(tokens: list[InlineToken]) -> None:
        if tokens and isinstance(tokens[-1], TextToken):
            content = tokens[-1].content.rstrip(" ")
            if content:
                tokens[-1] = TextToken(content=content)
            else:
                tokens.pop()

    def _assemble(self, tokens: list[InlineToken]) -> tuple[Inline, ...]:
        """Turn tokens into nodes.

        Adjacent text (including unmatched delimiter characters) is merged and
        then split into ``Str`` words and ``Space`` runs.
        """
        result: list[Inline] = []
        pending: list[str] = []

        for token in tokens:
            match token:
                case TextToken(content=content):
                    pending.append(content)
                    continue
                case DelimiterRun(char=char, length=length):
                    pending.append(char * length)
                    continue

            if pending:
                result.extend(_split_words("".join(pending)))
                pending.clear()

            match token:
                case CodeSpanToken(code=code):
                    result.append(Code(code))
                case NodeToken(node=node):
                    result.append(node)
                case HardBreakToken():
                    result.append(LineBreak())
                case SoftBreakToken():
                    result.append(SoftBreak())

        if pending:
            result.extend(_split_words("".join(pending)))
        return tuple(result)


def _split_words(text: str) -> list[Inline]:
    return [
        Space() if part[0] in " \t" else Str(part)
        for part in _WORDS_AND_SPACES.findall(text)
    ]
