"""Tests for container blocks: block quotes and lists."""

import pytest

from mdconvert import convert, parse
from mdconvert.nodes import (
    BlockQuote,
    BulletList,
    CodeBlock,
    Heading,
    ListAttributes,
    ListNumberDelim,
    ListNumberStyle,
    OrderedList,
    Paragraph,
    Plain,
    SoftBreak,
    Space,
    Str,
    ThematicBreak,
)
from mdconvert.parsing.blocks.dispatch import MAX_NESTING
from mdconvert.parsing.blocks.lists import parse_item_start
from mdconvert.parsing.scanner import Blank, LineScan, scan


def _para(text: str) -> Paragraph:
    return Paragraph((Str(text),))


def _plain(text: str) -> Plain:
    return Plain((Str(text),))


class TestBlockQuote:
    def test_simple(self) -> None:
        assert parse("> foo").children == (BlockQuote((_para("foo"),)),)

    def test_marker_space_optional(self) -> None:
        assert parse(">foo").children == (BlockQuote((_para("foo"),)),)

    def test_multiple_lines(self) -> None:
        doc = parse("> # Foo\n> bar")
        assert doc.children == (BlockQuote((Heading(1, (Str("Foo"),)), _para("bar"))),)

    def test_lazy_continuation(self) -> None:
        doc = parse("> foo\nbar")
        assert doc.children == (BlockQuote((Paragraph((Str("foo"), SoftBreak(), Str("bar"))),)),)

    def test_lazy_line_cannot_start_block(self) -> None:
        doc = parse("> foo\n---")
        assert doc.children == (BlockQuote((_para("foo"),)), ThematicBreak())

    def test_code_is_not_continued_lazily(self) -> None:
        doc = parse(">     code\n    more")
        assert doc.children == (BlockQuote((CodeBlock("code"),)), CodeBlock("more"))

    def test_blank_line_ends_quote(self) -> None:
        doc = parse("> a\n\n> b")
        assert doc.children == (BlockQuote((_para("a"),)), BlockQuote((_para("b"),)))

    def test_marked_blank_line_continues(self) -> None:
        doc = parse("> a\n>\n> b")
        assert doc.children == (BlockQuote((_para("a"), _para("b"))),)

    def test_nested(self) -> None:
        doc = parse("> > a\n> b")
        assert doc.children == (
            BlockQuote((BlockQuote((Paragraph((Str("a"), SoftBreak(), Str("b"))),)),)),
        )

    def test_interrupts_paragraph(self) -> None:
        doc = parse("a\n> b")
        assert doc.children == (_para("a"), BlockQuote((_para("b"),)))

    def test_empty(self) -> None:
        assert parse(">").children == (BlockQuote(()),)

    def test_tab_after_marker_is_code(self) -> None:
        assert parse(">\t\tfoo").children == (BlockQuote((CodeBlock("  foo"),)),)


class TestListItemStart:
    def _scan(self, text: str) -> LineScan:
        line = scan(text)
        assert isinstance(line, LineScan)
        return line

    def test_bullet(self) -> None:
        start = parse_item_start(self._scan("- foo"))
        assert start is not None
        assert start.content_column == 2
        assert start.marker.char == "-"

    def test_wide_gap(self) -> None:
        start = parse_item_start(self._scan("-   foo"))
        assert start is not None
        assert start.content_column == 4

    def test_five_spaces_is_code_in_item(self) -> None:
        start = parse_item_start(self._scan("-     foo"))
        assert start is not None
        assert start.content_column == 2
        assert isinstance(start.content, LineScan)
        assert start.content.indent == 4

    def test_empty_item(self) -> None:
        start = parse_item_start(self._scan("-"))
        assert start is not None
        assert isinstance(start.content, Blank)
        assert start.content_column == 2

    def test_ordered(self) -> None:
        start = parse_item_start(self._scan("123. foo"))
        assert start is not None
        assert (start.marker.ordered, start.marker.start, start.marker.char) == (True, 123, ".")
        assert start.content_column == 5

    def test_ten_digits_rejected(self) -> None:
        assert parse_item_start(self._scan("1234567890. foo")) is None

    def test_marker_needs_space(self) -> None:
        assert parse_item_start(self._scan("-foo")) is None
        assert parse_item_start(self._scan("1.foo")) is None


class TestBulletList:
    def test_tight(self) -> None:
        doc = parse("- a\n- b")
        assert doc.children == (BulletList(((_plain("a"),), (_plain("b"),))),)

    def test_loose(self) -> None:
        doc = parse("- a\n\n- b")
        assert doc.children == (BulletList(((_para("a"),), (_para("b"),))),)

    def test_tight_property(self) -> None:
        tight = parse("- a\n- b").children[0]
        loose = parse("- a\n\n- b").children[0]
        assert isinstance(tight, BulletList) and tight.tight
        assert isinstance(loose, BulletList) and not loose.tight

    def test_gap_inside_item_makes_loose(self) -> None:
        doc = parse("- a\n\n  b\n- c")
        assert doc.children == (
            BulletList(((_para("a"), _para("b")), (_para("c"),))),
        )

    def test_trailing_blank_line_keeps_tight(self) -> None:
        doc = parse("- a\n- b\n\n")
        assert doc.children == (BulletList(((_plain("a"),), (_plain("b"),))),)

    def test_fenced_code_blank_keeps_tight(self) -> None:
        doc = parse("- ```\n  a\n\n  b\n  ```\n- c")
        assert doc.children == (BulletList(((CodeBlock("a\n\nb"),), (_plain("c"),))),)

    def test_different_bullet_starts_new_list(self) -> None:
        doc = parse("- a\n+ b")
        assert doc.children == (BulletList(((_plain("a"),),)), BulletList(((_plain("b"),),)))

    def test_lazy_continuation(self) -> None:
        doc = parse("- a\nb")
        assert doc.children == (BulletList(((Plain((Str("a"), SoftBreak(), Str("b"))),),)),)

    def test_unindented_line_after_blank_ends_list(self) -> None:
        doc = parse("- a\n\nb")
        assert doc.children == (BulletList(((_plain("a"),),)), _para("b"))

    def test_nested(self) -> None:
        doc = parse("- a\n  - b\n- c")
        assert doc.children == (
            BulletList(
                (
                    (_plain("a"), BulletList(((_plain("b"),),))),
                    (_plain("c"),),
                )
            ),
        )

    def test_nested_looseness_is_separate(self) -> None:
        doc = parse("- a\n  - b\n\n  - c\n- d")
        outer = doc.children[0]
        assert isinstance(outer, BulletList)
        assert outer.items[0][0] == _plain("a")
        inner = outer.items[0][1]
        assert inner == BulletList(((_para("b"),), (_para("c"),)))

    def test_thematic_break_ends_list(self) -> None:
        doc = parse("- a\n* * *")
        assert doc.children == (BulletList(((_plain("a"),),)), ThematicBreak())

    def test_empty_item(self) -> None:
        doc = parse("- a\n-\n- c")
        assert doc.children == (BulletList(((_plain("a"),), (), (_plain("c"),))),)

    def test_empty_item_cannot_interrupt_paragraph(self) -> None:
        assert parse("a\n-\n").children == (Heading(2, (Str("a"),)),)
        assert parse("a\n*").children == (Paragraph((Str("a"), SoftBreak(), Str("*"))),)

    def test_empty_first_item_then_unindented_text(self) -> None:
        doc = parse("-\n\n  foo")
        assert doc.children == (BulletList(((),)), _para("foo"))

    def test_item_starting_with_code(self) -> None:
        doc = parse("-     code")
        assert doc.children == (BulletList(((CodeBlock("code"),),)),)

    def test_item_with_quote(self) -> None:
        doc = parse("- > q")
        assert doc.children == (BulletList(((BlockQuote((_para("q"),)),),)),)

    def test_interrupts_paragraph(self) -> None:
        doc = parse("a\n- b")
        assert doc.children == (_para("a"), BulletList(((_plain("b"),),)))


class TestOrderedList:
    def test_attributes(self) -> None:
        doc = parse("1. a\n2. b")
        assert doc.children == (
            OrderedList(
                ((_plain("a"),), (_plain("b"),)),
                ListAttributes(1, ListNumberStyle.DECIMAL, ListNumberDelim.PERIOD),
            ),
        )

    def test_start_number_and_paren(self) -> None:
        block = parse("3) a").children[0]
        assert isinstance(block, OrderedList)
        assert block.attributes == ListAttributes(
            3, ListNumberStyle.DECIMAL, ListNumberDelim.ONE_PAREN
        )

    def test_only_one_interrupts_paragraph(self) -> None:
        assert parse("a\n2. b").children == (
            Paragraph((Str("a"), SoftBreak(), Str("2."), Space(), Str("b"))),
        )
        doc = parse("a\n1. b")
        assert doc.children == (
            _para("a"),
            OrderedList(
                ((_plain("b"),),),
                ListAttributes(1, ListNumberStyle.DECIMAL, ListNumberDelim.PERIOD),
            ),
        )

    def test_different_delimiter_starts_new_list(self) -> None:
        doc = parse("1. a\n2) b")
        assert len(doc.children) == 2
        assert all(isinstance(block, OrderedList) for block in doc.children)

    def test_ordered_and_bullet_do_not_mix(self) -> None:
        doc = parse("1. a\n- b")
        assert isinstance(doc.children[0], OrderedList)
        assert isinstance(doc.children[1], BulletList)


class TestNestingLimit:
    """Containers deeper than the limit degrade to paragraph text."""

    def test_deep_block_quotes(self) -> None:
        doc = parse(">" * 1000 + " a")
        block = doc.children[0]
        for _ in range(MAX_NESTING):
            assert isinstance(block, BlockQuote)
            (block,) = block.children
        assert block == Paragraph((Str(">" * (1000 - MAX_NESTING)), Space(), Str("a")))

    def test_deep_lists(self) -> None:
        doc = parse("- " * 1000 + "a")
        block = doc.children[0]
        for _ in range(MAX_NESTING):
            assert isinstance(block, BulletList)
            ((block,),) = block.items
        inlines: list[Str | Space] = []
        for word in ["-"] * (1000 - MAX_NESTING) + ["a"]:
            inlines += [Str(word), Space()]
        assert block == Plain(tuple(inlines[:-1]))

    def test_deep_indented_lists(self) -> None:
        source = "\n".join("  " * i + "- item" for i in range(1000))
        doc = parse(source)
        assert isinstance(doc.children[0], BulletList)

    def test_within_limit_is_unchanged(self) -> None:
        doc = parse(">" * MAX_NESTING + " a")
        block = doc.children[0]
        for _ in range(MAX_NESTING):
            assert isinstance(block, BlockQuote)
            (block,) = block.children
        assert block == _para("a")

    @pytest.mark.parametrize("target", ["json", "latex", "typst"])
    def test_deep_input_can_be_written(self, target: str) -> None:
        assert convert(">" * 1000 + " a\n\n" + "- " * 1000 + "a", to=target)
