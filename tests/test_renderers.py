"""Tests for the LaTeX and Typst writers."""

import pytest

from mdconvert import parse
from mdconvert.errors import UnsupportedConstructError
from mdconvert.nodes import (
    Cell,
    ColSpec,
    Div,
    Document,
    Emph,
    Math,
    MathType,
    Paragraph,
    Row,
    Str,
    Strong,
    Table,
    TableBody,
    TableHead,
)
from mdconvert.renderers import DocumentWriter, LatexWriter, TypstWriter
from mdconvert.renderers.latex import PREAMBLE, escape_latex
from mdconvert.renderers.typst import escape_typst, typst_string

_LATEX_HEAD = PREAMBLE + "\\begin{document}\n"
_LATEX_TAIL = "\n\\end{document}"


def latex_body(source: str) -> str:
    """LaTeX output for ``source`` without the preamble and document wrapper."""
    output = LatexWriter().write(parse(source))
    assert output.startswith(_LATEX_HEAD)
    assert output.endswith(_LATEX_TAIL)
    return output[len(_LATEX_HEAD) : -len(_LATEX_TAIL)]


def typst(source: str) -> str:
    return TypstWriter().write(parse(source))


def _nested_cell_table() -> Document:
    cell = Cell(children=(Paragraph((Str("x"),)),))
    return Document(
        (
            Table(
                colspecs=(ColSpec(),),
                head=TableHead(rows=(Row(cells=(cell,)),)),
                bodies=(TableBody(),),
            ),
        )
    )


class TestWriterProtocol:
    @pytest.mark.parametrize("writer", [LatexWriter(), TypstWriter()])
    def test_conforms(self, writer: DocumentWriter) -> None:
        assert isinstance(writer.write(Document(())), str)


class TestLatexEscaping:
    def test_special_characters(self) -> None:
        assert escape_latex("a&b%c$d#e_f{g}h") == "a\\&b\\%c\\$d\\#e\\_f\\{g\\}h"

    def test_characters_with_commands(self) -> None:
        assert escape_latex("~^\\`") == (
            "\\textasciitilde{}\\^{}\\textbackslash{}\\textasciigrave{}"
        )

    def test_plain_text_unchanged(self) -> None:
        assert escape_latex("hello world") == "hello world"


class TestLatexBlocks:
    def test_document_wrapper(self) -> None:
        output = LatexWriter().write(parse(""))
        assert output == _LATEX_HEAD + _LATEX_TAIL
        assert output.startswith("\\documentclass[]{article}\n")

    def test_preamble_packages(self) -> None:
        for package in ("ulem", "graphicx", "hyperref", "listings"):
            assert package in PREAMBLE

    def test_paragraph(self) -> None:
        assert latex_body("hello") == "\nhello\n"

    @pytest.mark.parametrize(
        ("source", "command"),
        [
            ("# T", "section"),
            ("## T", "subsection"),
            ("### T", "subsubsection"),
            ("#### T", "paragraph"),
            ("##### T", "subparagraph"),
        ],
    )
    def test_headings(self, source: str, command: str) -> None:
        assert latex_body(source) == f"\n\\{command}{{T}}\n"

    def test_level_six_heading_is_plain_text(self) -> None:
        assert latex_body("###### T") == "\nT\n"

    def test_tight_bullet_list(self) -> None:
        assert latex_body("- a\n- b") == (
            "\n\\begin{itemize}\n\\tightlist\n\\item\na\n\\item\nb\n\\end{itemize}\n"
        )

    def test_loose_bullet_list(self) -> None:
        assert latex_body("- a\n\n- b") == (
            "\n\\begin{itemize}\n\\item\n\na\n\n\\item\n\nb\n\n\\end{itemize}\n"
        )

    def test_ordered_list_start(self) -> None:
        assert latex_body("3. a") == (
            "\n\\begin{enumerate}\n\\setcounter{enumi}{2}\n\\tightlist\n\\item\na\n"
            "\\end{enumerate}\n"
        )

    def test_ordered_list_from_one_has_no_counter(self) -> None:
        assert "setcounter" not in latex_body("1. a")

    def test_nested_ordered_counter(self) -> None:
        assert "\\setcounter{enumii}{2}" in latex_body("1. x\n\n   3. b")

    def test_code_block(self) -> None:
        assert latex_body("```py\nx = 1\n```") == (
            "\n\\begin{lstlisting}[language=py]\nx = 1\n\\end{lstlisting}\n"
        )

    def test_code_block_without_language(self) -> None:
        assert latex_body("    x") == "\n\\begin{lstlisting}\nx\n\\end{lstlisting}\n"

    def test_code_block_is_not_escaped(self) -> None:
        assert "a_b & c" in latex_body("    a_b & c")

    def test_block_quote(self) -> None:
        assert latex_body("> a") == "\n\\begin{quote}\n\na\n\n\\end{quote}\n"

    def test_thematic_break(self) -> None:
        assert latex_body("***") == (
            "\n\\begin{center}\\rule{0.5\\linewidth}{0.5pt}\\end{center}\n"
        )

    def test_table(self) -> None:
        assert latex_body("| a | b |\n|:--|--:|\n| 1 |") == (
            "\n\\begin{tabular}{|l|r|} \\hline \n"
            "a&b\\\\\\hline\n"
            "1&\\\\\\hline\n"
            "\\end{tabular}\n"
        )

    def test_table_cell_with_blocks_is_rejected(self) -> None:
        with pytest.raises(UnsupportedConstructError) as exc_info:
            LatexWriter().write(_nested_cell_table())
        assert exc_info.value.construct == "Table cell with nested blocks"


class TestLatexInlines:
    def test_formatting(self) -> None:
        assert latex_body("*a* **b** ~~c~~") == "\n\\emph{a} \\textbf{b} \\sout{c}\n"

    def test_text_is_escaped(self) -> None:
        assert latex_body("100% of $5") == "\n100\\% of \\$5\n"

    def test_code(self) -> None:
        assert latex_body("`a_b`") == "\n\\texttt{a\\_b}\n"

    def test_link(self) -> None:
        assert latex_body("[a](/u#x%20)") == "\n\\href{/u\\#x\\%20}{a}\n"

    def test_image(self) -> None:
        assert latex_body("![a](/i.png)") == (
            "\n\n\\includegraphics[width=\\linewidth]{/i.png}\n\n"
        )

    def test_line_break(self) -> None:
        assert latex_body("a\\\nb") == "\na\\\\\nb\n"

    def test_soft_break_is_space(self) -> None:
        assert latex_body("a\nb") == "\na b\n"


class TestLatexUnsupported:
    def test_block(self) -> None:
        with pytest.raises(UnsupportedConstructError) as exc_info:
            LatexWriter().write(Document((Div((Paragraph((Str("x"),)),)),)))
        assert exc_info.value.construct == "Div"
        assert exc_info.value.output_format == "latex"

    def test_inline(self) -> None:
        doc = Document((Paragraph((Math(MathType.INLINE, "x"),)),))
        with pytest.raises(UnsupportedConstructError, match="Math is not supported"):
            LatexWriter().write(doc)


class TestTypstEscaping:
    def test_markup_characters(self) -> None:
        assert escape_typst("#a") == "\\#a"
        assert escape_typst("*_`$") == "\\*\\_\\`\\$"

    def test_digits(self) -> None:
        assert escape_typst("1.") == "\\1."

    def test_plain_text_unchanged(self) -> None:
        assert escape_typst("hello") == "hello"

    def test_string_literal(self) -> None:
        assert typst_string('a "b" \\c') == '"a \\"b\\" \\\\c"'


class TestTypstBlocks:
    def test_empty_document(self) -> None:
        assert TypstWriter().write(Document(())) == ""

    def test_paragraph(self) -> None:
        assert typst("hello") == "\nhello\n"

    def test_headings(self) -> None:
        assert typst("# Title") == "\n= Title\n"
        assert typst("### Title") == "\n=== Title\n"

    def test_bullet_list(self) -> None:
        assert typst("- a\n- b") == "\n- a\n- b\n\n"

    def test_ordered_list(self) -> None:
        assert typst("1. a\n2. b") == "\n1. a\n2. b\n\n"

    def test_ordered_list_start(self) -> None:
        assert typst("7. a\n8. b") == "\n7. a\n8. b\n\n"

    def test_nested_item_is_indented(self) -> None:
        assert "\n  - b" in typst("- a\n  - b")

    def test_code_block(self) -> None:
        assert typst("```py\nx\n```") == "\n```py\nx\n```\n"

    def test_code_block_fence_outgrows_content(self) -> None:
        assert typst("````\n```\n````") == "\n````\n```\n````\n"

    def test_block_quote(self) -> None:
        assert typst("> a") == "\n#quote(block: true)[\na\n]\n"

    def test_thematic_break(self) -> None:
        assert typst("***") == "\n#line(length: 100%)\n"

    def test_table(self) -> None:
        assert typst("| a | b |\n|:--|--:|\n| 1 |") == (
            "\n#table(\n"
            "columns: 2,\n"
            "align: (col, row) => (left,right,).at(col),\n"
            "[a],\n"
            "[b],\n"
            "[\\1],\n"
            "[],\n"
            ")\n"
        )

    def test_table_cell_with_blocks_is_rejected(self) -> None:
        with pytest.raises(UnsupportedConstructError):
            TypstWriter().write(_nested_cell_table())


class TestTypstInlines:
    def test_emphasis(self) -> None:
        assert typst("*hi*") == "\n_hi_\n"
        assert typst("**hi**") == "\n*hi*\n"

    def test_nested_emphasis_is_not_repeated(self) -> None:
        doc = Document((Paragraph((Emph((Str("a"), Emph((Str("b"),)))),)),))
        assert TypstWriter().write(doc) == "\n_ab_\n"

    def test_strong_inside_emph(self) -> None:
        doc = Document((Paragraph((Emph((Strong((Str("a"),)),)),)),))
        assert TypstWriter().write(doc) == "\n_*a*_\n"

    def test_text_is_escaped(self) -> None:
        assert typst("\\#1") == "\n\\#\\1\n"

    def test_code(self) -> None:
        assert typst("`x`") == '\n#raw("x")\n'

    def test_strikeout(self) -> None:
        assert typst("~~a~~") == "\n#strike[a]\n"

    def test_link(self) -> None:
        assert typst("[a](/u)") == '\n#link("/u")[a]\n'

    def test_image(self) -> None:
        assert typst("![a](/i.png)") == '\n#figure(image("/i.png", width: 100%))\n'

    def test_line_break(self) -> None:
        assert typst("a  \nb") == "\na\\\nb\n"


class TestTypstUnsupported:
    def test_block(self) -> None:
        with pytest.raises(UnsupportedConstructError) as exc_info:
            TypstWriter().write(Document((Div(()),)))
        assert exc_info.value.construct == "Div"
        assert exc_info.value.output_format == "typst"

    def test_inline(self) -> None:
        doc = Document((Paragraph((Math(MathType.DISPLAY, "x"),)),))
        with pytest.raises(UnsupportedConstructError):
            TypstWriter().write(doc)
