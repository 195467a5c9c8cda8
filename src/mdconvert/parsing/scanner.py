"""Line indentation scanner.

Every block recognizer starts from the same question: how far is the first
visible character indented, and what is it? ``scan`` answers that with tab
stops of 4 columns, counted from the absolute column so that a tab keeps its
width when a container (``>`` or a list marker) has already consumed part of
the line.

Indents are relative to the ``column`` the scan started at; ``column`` on the
result is absolute. Containers pass dedented scans to their nested drivers, so
every recognizer only ever looks at ``indent``.

Example:
    >>> line = scan("  - item")
    >>> line.first, line.indent
    ('-', 2)
    >>> rest = line.scan_rest()
    >>> rest.first, rest.indent, rest.column
    ('i', 1, 4)

"""

from __future__ import annotations

from dataclasses import dataclass, replace

TAB_STOP = 4

# Lines indented this far (relative to their container) are indented code
CODE_INDENT = 4


@dataclass(frozen=True, slots=True)
class Blank:
    """A line holding nothing but spaces and tabs."""

    indent: int
    lineno: int = 0

    def dedent(self, columns: int) -> Blank:
        return replace(self, indent=max(0, self.indent - columns))


@dataclass(frozen=True, slots=True)
class LineScan:
    """A non-blank line, positioned at its first visible character.

    Attributes:
        first: First non-space, non-tab character
        indent: Indentation columns before ``first``, relative to the scan start
        column: Absolute column of ``first``
        text: The line from ``first`` to the end
        lineno: Zero-based source line number
        depth: Container nesting depth of the driver reading the line

    """

    first: str
    indent: int
    column: int
    text: str
    lineno: int = 0
    depth: int = 0

    @property
    def rest(self) -> str:
        """Text after the first character."""
        return self.text[1:]

    def scan_rest(self) -> LineScan | Blank:
        """Scan the remainder after ``first``, continuing the column count."""
        return scan(self.text[1:], self.column + 1, self.lineno)

    def advance(self, count: int) -> LineScan | Blank:
        """Scan the remainder after ``count`` non-tab characters of ``text``."""
        return scan(self.text[count:], self.column + count, self.lineno)

    def dedent(self, columns: int) -> LineScan:
        """Remove ``columns`` of indentation (must not exceed ``indent``)."""
        return replace(self, indent=self.indent - columns)

    def dedent_capped(self, columns: int) -> LineScan:
        """Remove up to ``columns`` of indentation."""
        return replace(self, indent=max(0, self.indent - columns))

    def full(self) -> str:
        """The line with its remaining indentation rendered as spaces."""
        return " " * self.indent + self.text


def scan(line: str, column: int = 0, lineno: int = 0) -> LineScan | Blank:
    """Measure the indentation of ``line`` starting at absolute ``column``.

    Args:
        line: Text to scan (no line terminator)
        column: Absolute column where ``line`` begins
        lineno: Source line number carried onto the result

    Returns:
        LineScan for a line with visible content, Blank otherwise.
    """
    total = column
    for index, char in enumerate(line):
        if char == " ":
            total += 1
        elif char == "\t":
            total += TAB_STOP - total % TAB_STOP
        else:
            return LineScan(
                first=char,
                indent=total - column,
                column=total,
                text=line[index:],
                lineno=lineno,
            )
    return Blank(indent=total - column, lineno=lineno)


def split_lines(source: str) -> list[str]:
    """Split source text into lines, accepting LF, CRLF and CR endings.

    A final line terminator does not produce an extra empty line.
    """
    if not source:
        return []
    text = source.replace("\r\n", "\n").replace("\r", "\n")
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines
