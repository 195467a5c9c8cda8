"""Property-based tests for the parser and writers using Hypothesis.

These tests verify invariants that should hold for any input:
1. Parsing never raises
2. Parsing is deterministic
3. Native JSON round-trips every parsed tree
4. Every parsed tree can be written as LaTeX and Typst
"""

from collections.abc import Iterator

from hypothesis import given, settings
from hypothesis import strategies as st

from mdconvert import parse
from mdconvert.nodes import (
    Block,
    BlockQuote,
    BulletList,
    Document,
    OrderedList,
    Table,
)
from mdconvert.renderers import LatexWriter, TypstWriter
from mdconvert.serialization import from_json, to_json

# Characters that drive Markdown syntax, plus a little plain text
MARKDOWN_ALPHABET = list("ab1 \t\n*_~`#>-+=|:.)[]()!\\&;<")

markdown_text = st.text(alphabet=st.sampled_from(MARKDOWN_ALPHABET), max_size=200)
markdown_lines = st.lists(
    st.sampled_from(
        [
            "# heading",
            "para text",
            "- item",
            "  - nested",
            "1. first",
            "> quote",
            "```",
            "    code",
            "| a | b |",
            "|---|:-:|",
            "***",
            "",
            "[ref]: /url",
            "[ref] and *emph*",
        ]
    ),
    max_size=20,
).map("\n".join)


def _walk(blocks: tuple[Block, ...]) -> Iterator[Block]:
    for block in blocks:
        yield block
        match block:
            case BlockQuote(children=children):
                yield from _walk(children)
            case BulletList(items=items) | OrderedList(items=items):
                for item in items:
                    yield from _walk(item)


class TestParserProperties:
    @given(source=markdown_text)
    @settings(max_examples=50)
    def test_parse_never_raises(self, source: str) -> None:
        assert isinstance(parse(source), Document)

    @given(source=markdown_text)
    @settings(max_examples=50)
    def test_parse_is_deterministic(self, source: str) -> None:
        assert parse(source) == parse(source)

    @given(source=markdown_lines)
    @settings(max_examples=50)
    def test_structured_input(self, source: str) -> None:
        assert isinstance(parse(source), Document)

    @given(source=markdown_lines)
    @settings(max_examples=50)
    def test_table_rows_match_column_count(self, source: str) -> None:
        for block in _walk(parse(source).children):
            if isinstance(block, Table):
                width = len(block.colspecs)
                for row in (*block.head.rows, *block.rows):
                    assert len(row.cells) == width


class TestRoundTripProperties:
    @given(source=markdown_text)
    @settings(max_examples=50)
    def test_json_round_trip(self, source: str) -> None:
        doc = parse(source)
        assert from_json(to_json(doc)) == doc

    @given(source=markdown_lines)
    @settings(max_examples=50)
    def test_json_round_trip_structured(self, source: str) -> None:
        doc = parse(source)
        assert from_json(to_json(doc)) == doc


class TestWriterProperties:
    @given(source=markdown_text)
    @settings(max_examples=50)
    def test_latex_writes_any_parsed_tree(self, source: str) -> None:
        assert LatexWriter().write(parse(source)).endswith("\\end{document}")

    @given(source=markdown_text)
    @settings(max_examples=50)
    def test_typst_writes_any_parsed_tree(self, source: str) -> None:
        assert isinstance(TypstWriter().write(parse(source)), str)
