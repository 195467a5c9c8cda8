"""StringBuilder for O(n) writer output.

Appends to a list and joins once at the end. Writers for indentation-based
formats (Typst list nesting) also need every new line to start with the
current nesting prefix; ``push_prefix``/``pop_prefix`` maintain that prefix
and ``newline`` emits it.

Thread Safety:
StringBuilder instances are local to each write() call.

"""

from __future__ import annotations


class StringBuilder:
    """Efficient string accumulator with a line prefix stack.

    Usage:
        >>> sb = StringBuilder()
        >>> sb.push_prefix("  ")
        >>> sb.append("- one").newline().append("- nested").build()
        '- one\\n  - nested'

    """

    __slots__ = ("_parts", "_prefixes")

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._prefixes: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append a string (empty strings are skipped)."""
        if s:
            self._parts.append(s)
        return self

    def newline(self) -> StringBuilder:
        """Start a new line carrying the current prefix."""
        self._parts.append("\n")
        self._parts.extend(self._prefixes)
        return self

    def push_prefix(self, prefix: str) -> None:
        self._prefixes.append(prefix)

    def pop_prefix(self) -> None:
        self._prefixes.pop()

    def build(self) -> str:
        """Join all parts into final string."""
        return "".join(self._parts)

