"""LaTeX writer.

Renders a document as a standalone ``article``. Only the constructs that
GitHub-Flavoured Markdown produces are supported; anything else raises
``UnsupportedConstructError``.

Example:
    >>> from mdconvert import parse
    >>> from mdconvert.renderers.latex import LatexWriter
    >>> print(LatexWriter().write(parse("*hi*")))  # doctest: +ELLIPSIS
    \\documentclass[]{article}
    ...
    \\emph{hi}
    ...

"""

from __future__ import annotations

from mdconvert.errors import UnsupportedConstructError
from mdconvert.nodes import (
    Alignment,
    Block,
    BlockQuote,
    BulletList,
    Code,
    CodeBlock,
    Document,
    Emph,
    Heading,
    Image,
    Inline,
    LineBreak,
    Link,
    OrderedList,
    Paragraph,
    Plain,
    Row,
    SoftBreak,
    Space,
    Str,
    Strikeout,
    Strong,
    Table,
    ThematicBreak,
)
from mdconvert.stringbuilder import StringBuilder
from mdconvert.utils.logger import get_logger

logger = get_logger(__name__)

FORMAT_NAME = "latex"

PREAMBLE = (
    "\\documentclass[]{article}\n"
    "\\usepackage[utf8]{inputenc}\n"
    "\\usepackage[normalem]{ulem}\n"
    "\\usepackage{graphicx}\n"
    "\\usepackage{hyperref}\n"
    "\\usepackage{listings}\n"
    "\\providecommand{\\tightlist}{\\setlength{\\itemsep}{0pt}\\setlength{\\parskip}{0pt}}\n"
)

_SECTIONS = {
    1: "section",
    2: "subsection",
    3: "subsubsection",
    4: "paragraph",
    5: "subparagraph",
}

_COLUMN_ALIGN = {
    Alignment.LEFT: "l",
    Alignment.RIGHT: "r",
    Alignment.CENTER: "c",
    Alignment.DEFAULT: "c",
}

_ESCAPES = {
    "&": "\\&",
    "%": "\\%",
    "$": "\\$",
    "#": "\\#",
    "_": "\\_",
    "{": "\\{",
    "}": "\\}",
    "~": "\\textasciitilde{}",
    "^": "\\^{}",
    "\\": "\\textbackslash{}",
    "`": "\\textasciigrave{}",
}
_ESCAPE_TABLE = str.maketrans(_ESCAPES)

# Characters hyperref needs escaped inside \href URLs
_URL_ESCAPE_TABLE = str.maketrans({"%": "\\%", "#": "\\#"})


def escape_latex(text: str) -> str:
    """Escape the characters LaTeX treats as markup.

    Example:
        >>> escape_latex("50% & more")
        '50\\\\% \\\\& more'

    """
    return text.translate(_ESCAPE_TABLE)


def _unsupported(construct: str) -> UnsupportedConstructError:
    logger.debug("Cannot write %s as %s", construct, FORMAT_NAME)
    return UnsupportedConstructError(construct, FORMAT_NAME)


class LatexWriter:
    """Render a document as a LaTeX article.

    Lists nest ``enumerate``/``itemize`` environments; tight lists get
    ``\\tightlist``. Ordered lists not starting at 1 set the counter of their
    nesting level.
    """

    __slots__ = ()

    def write(self, doc: Document) -> str:
        sb = StringBuilder()
        sb.append(PREAMBLE)
        sb.append("\\begin{document}\n")
        self._write_blocks(doc.children, sb, depth=0)
        sb.append("\n\\end{document}")
        return sb.build()

    def _write_blocks(self, blocks: tuple[Block, ...], sb: StringBuilder, depth: int) -> None:
        for block in blocks:
            self._write_block(block, sb, depth)

    def _write_block(self, block: Block, sb: StringBuilder, depth: int) -> None:
        match block:
            case Plain(children=children):
                self._write_inlines(children, sb)
            case Paragraph(children=children):
                sb.append("\n")
                self._write_inlines(children, sb)
                sb.append("\n")
            case CodeBlock():
                self._write_code_block(block, sb)
            case BlockQuote(children=children):
                sb.append("\n\\begin{quote}\n")
                self._write_blocks(children, sb, depth)
                sb.append("\n\\end{quote}\n")
            case OrderedList():
                self._write_ordered_list(block, sb, depth + 1)
            case BulletList():
                self._write_list("itemize", block.items, block.tight, sb, depth)
            case Heading():
                self._write_heading(block, sb)
            case ThematicBreak():
                sb.append("\n\\begin{center}\\rule{0.5\\linewidth}{0.5pt}\\end{center}\n")
            case Table():
                self._write_table(block, sb)
            case _:
                raise _unsupported(type(block).__name__)

    def _write_code_block(self, block: CodeBlock, sb: StringBuilder) -> None:
        sb.append("\n\\begin{lstlisting}")
        if block.info:
            sb.append(f"[language={block.info}]")
        sb.append("\n").append(block.code).append("\n\\end{lstlisting}\n")

    def _write_ordered_list(self, block: OrderedList, sb: StringBuilder, depth: int) -> None:
        start = block.attributes.start
        counter = f"\n\\setcounter{{enum{'i' * depth}}}{{{start - 1}}}" if start != 1 else ""
        self._write_list("enumerate", block.items, block.tight, sb, depth, counter)

    def _write_list(
        self,
        environment: str,
        items: tuple[tuple[Block, ...], ...],
        tight: bool,
        sb: StringBuilder,
        depth: int,
        counter: str = "",
    ) -> None:
        sb.append(f"\n\\begin{{{environment}}}").append(counter)
        if tight:
            sb.append("\n\\tightlist")
        for item in items:
            sb.append("\n\\item\n")
            self._write_blocks(item, sb, depth)
        sb.append(f"\n\\end{{{environment}}}\n")

    def _write_heading(self, block: Heading, sb: StringBuilder) -> None:
        section = _SECTIONS.get(block.level)
        if section is None:
            sb.append("\n")
            self._write_inlines(block.children, sb)
            sb.append("\n")
            return
        sb.append(f"\n\\{section}{{")
        self._write_inlines(block.children, sb)
        sb.append("}\n")

    def _write_table(self, table: Table, sb: StringBuilder) -> None:
        width = len(table.colspecs)
        columns = "".join(f"{_COLUMN_ALIGN[spec.alignment]}|" for spec in table.colspecs)
        sb.append(f"\n\\begin{{tabular}}{{|{columns}}} \\hline \n")
        for row in (*table.head.rows, *table.rows):
            self._write_row(row, width, sb)
        sb.append("\\end{tabular}\n")

    def _write_row(self, row: Row, width: int, sb: StringBuilder) -> None:
        cells = []
        for cell in row.cells[:width]:
            cell_sb = StringBuilder()
            match cell.children:
                case ():
                    pass
                case (Plain(children=children),):
                    self._write_inlines(children, cell_sb)
                case _:
                    raise _unsupported("Table cell with nested blocks")
            cells.append(cell_sb.build())
        cells.extend("" for _ in range(width - len(cells)))
        sb.append("&".join(cells)).append("\\\\\\hline\n")

    def _write_inlines(self, inlines: tuple[Inline, ...], sb: StringBuilder) -> None:
        for inline in inlines:
            self._write_inline(inline, sb)

    def _write_inline(self, inline: Inline, sb: StringBuilder) -> None:
        match inline:
            case Str(content=content):
                sb.append(escape_latex(content))
            case Space() | SoftBreak():
                sb.append(" ")
            case LineBreak():
                sb.append("\\\\\n")
            case Emph(children=children):
                self._wrap("\\emph{", children, sb)
            case Strong(children=children):
                self._wrap("\\textbf{", children, sb)
            case Strikeout(children=children):
                self._wrap("\\sout{", children, sb)
            case Code(code=code):
                sb.append("\\texttt{").append(escape_latex(code)).append("}")
            case Link(children=children, url=url):
                sb.append("\\href{").append(url.translate(_URL_ESCAPE_TABLE)).append("}{")
                self._write_inlines(children, sb)
                sb.append("}")
            case Image(url=url):
                sb.append("\n\\includegraphics[width=\\linewidth]{").append(url).append("}\n")
            case _:
                raise _unsupported(type(inline).__name__)

    def _wrap(self, command: str, children: tuple[Inline, ...], sb: StringBuilder) -> None:
        sb.append(command)
        self._write_inlines(children, sb)
        sb.append("}")
