"""Delimiter matching for ``*``, ``_`` and ``~`` runs.

Turns matched runs into ``Emph``, ``Strong`` and ``Strikeout`` following
the CommonMark delimiter stack; unmatched runs fall back to literal text.
See: https://spec.commonmark.org/0.31.2/#emphasis-and-strong-emphasis

"""

from __future__ import annotations

from mdconvert.nodes import Emph, Inline, Strikeout, Strong
from mdconvert.parsing.charsets import (
    is_unicode_punctuation,
    is_unicode_whitespace,
)
from mdconvert.parsing.inline.tokens import (
    DelimiterRun,
    InlineToken,
    NodeToken,
)


class EmphasisMixin:
    """Flanking rules and the matching pass.

    Matching rewrites the token list in place: the tokens between a matched
    opener and closer collapse into one ``NodeToken`` and the delimiter runs
    shrink.

    Required Host Methods:
        - _assemble(tokens) -> tuple[Inline, ...]

    """

    def _is_left_flanking(self, before: str, after: str) -> bool:
        """A run can open when nothing blank follows it, and punctuation after
        it is only allowed when blank or punctuation comes before."""
        if self._is_whitespace(after):
            return False
        if not self._is_punctuation(after):
            return True
        return self._is_whitespace(before) or self._is_punctuation(before)

    def _is_right_flanking(self, before: str, after: str) -> bool:
        """Mirror image of ``_is_left_flanking``."""
        if self._is_whitespace(before):
            return False
        if not self._is_punctuation(before):
            return True
        return self._is_whitespace(after) or self._is_punctuation(after)

    def _is_whitespace(self, char: str) -> bool:
        """Unicode whitespace; the start and end of text count as whitespace."""
        return is_unicode_whitespace(char)

    def _is_punctuation(self, char: str) -> bool:
        """Unicode punctuation (categories P* and S*)."""
        return is_unicode_punctuation(char)

    def _delimiter_run(self, text: str, start: int, end: int) -> DelimiterRun:
        """Build a run for ``text[start:end]`` with its open/close abilities."""
        char = text[start]
        before = text[start - 1] if start > 0 else ""
        after = text[end] if end < len(text) else ""
        left = self._is_left_flanking(before, after)
        right = self._is_right_flanking(before, after)

        if char == "_":
            # Intraword underscores neither open nor close
            can_open = left and (not right or self._is_punctuation(before))
            can_close = right and (not left or self._is_punctuation(after))
        else:
            can_open = left
            can_close = right

        return DelimiterRun(
            char=char,  # type: ignore[arg-type]
            length=end - start,
            original=end - start,
            can_open=can_open,
            can_close=can_close,
            start=start,
            end=end,
        )

    def _process_emphasis(self, tokens: list[InlineToken]) -> None:
        """Match delimiter runs and replace matched spans with nodes.

        Closers are visited left to right; each looks back for the nearest
        compatible opener. Unused characters stay in the runs and are emitted
        as literal text later.
        """
        stack = [token for token in tokens if isinstance(token, DelimiterRun)]
        closer_idx = 0

        while closer_idx < len(stack):
            closer = stack[closer_idx]
            if not closer.can_close:
                closer_idx += 1
                continue

            opener_idx = self._find_opener(stack, closer_idx)
            if opener_idx is None:
                if closer.can_open:
                    closer_idx += 1
                else:
                    del stack[closer_idx]
                continue

            opener = stack[opener_idx]
            self._wrap(tokens, opener, closer)

            # Delimiters between the pair can no longer match anything
            del stack[opener_idx + 1 : closer_idx]
            closer_idx = opener_idx + 1

            if opener.length == 0:
                tokens.remove(opener)
                del stack[opener_idx]
                closer_idx -= 1
            if closer.length == 0:
                tokens.remove(closer)
                del stack[closer_idx]

    def _find_opener(self, stack: list[DelimiterRun], closer_idx: int) -> int | None:
        closer = stack[closer_idx]
        for idx in range(closer_idx - 1, -1, -1):
            opener = stack[idx]
            if opener.char != closer.char or not opener.can_open:
                continue

            if closer.char == "~":
                # Strikethrough needs runs of equal length
                if opener.original == closer.original:
                    return idx
                continue

            # Multiple-of-3 rule for runs that can both open and close
            if (
                (opener.can_close or closer.can_open)
                and (opener.original + closer.original) % 3 == 0
                and not (opener.original % 3 == 0 and closer.original % 3 == 0)
            ):
                continue
            return idx
        return None

    def _wrap(self, tokens: list[InlineToken], opener: DelimiterRun, closer: DelimiterRun) -> None:
        """Collapse the tokens between ``opener`` and ``closer`` into one node."""
        if opener.char == "~":
            used = closer.length
        else:
            used = 2 if opener.length >= 2 and closer.length >= 2 else 1

        start = tokens.index(opener)
        end = tokens.index(closer)
        children = self._assemble(tokens[start + 1 : end])

        node: Inline
        if opener.char == "~":
            node = Strikeout(children)
        elif used == 2:
            node = Strong(children)
        else:
            node = Emph(children)
        tokens[start + 1 : end] = [NodeToken(node)]

        opener.consume_as_opener(used)
        closer.consume_as_closer(used)
