"""Tests for links, images and link reference definitions."""

import time

import pytest

from mdconvert import parse
from mdconvert.config import ParseConfig
from mdconvert.nodes import (
    BlockQuote,
    Emph,
    Image,
    Inline,
    Link,
    Paragraph,
    Space,
    Str,
)
from mdconvert.parsing.inline.links import (
    MAX_LINK_NESTING,
    normalize_label,
    parse_link_destination,
    parse_link_title,
)
from mdconvert.parsing.references import LinkReferences, extract_definitions


def _link(text: str, url: str, title: str = "") -> Link:
    return Link((Str(text),), url, title)


class TestInlineLinks:
    def test_simple(self) -> None:
        assert parse("[a](/u)").children == (Paragraph((_link("a", "/u"),)),)

    def test_title(self) -> None:
        assert parse('[a](/u "t")').children == (Paragraph((_link("a", "/u", "t"),)),)

    @pytest.mark.parametrize("source", ["[a](/u 't')", "[a](/u (t))"])
    def test_title_delimiters(self, source: str) -> None:
        assert parse(source).children == (Paragraph((_link("a", "/u", "t"),)),)

    def test_angle_destination_with_space(self) -> None:
        assert parse("[a](<b c>)").children == (Paragraph((_link("a", "b c"),)),)

    def test_empty_destination(self) -> None:
        assert parse("[a]()").children == (Paragraph((_link("a", ""),)),)

    def test_escapes_and_entities_in_destination(self) -> None:
        assert parse("[a](/u\\_v?x&amp;y)").children == (Paragraph((_link("a", "/u_v?x&y"),)),)

    def test_link_text_is_inline_parsed(self) -> None:
        doc = parse("[*a*](/u)")
        assert doc.children == (Paragraph((Link((Emph((Str("a"),)),), "/u"),)),)

    def test_links_do_not_nest(self) -> None:
        doc = parse("[a [b](/x)](/y)")
        assert doc.children == (
            Paragraph((Str("[a"), Space(), _link("b", "/x"), Str("](/y)"))),
        )

    def test_image(self) -> None:
        doc = parse('![alt](/i.png "pic")')
        assert doc.children == (Paragraph((Image((Str("alt"),), "/i.png", "pic"),)),)

    def test_image_alt_may_hold_link(self) -> None:
        doc = parse("![[a](/u)](/i.png)")
        assert doc.children == (Paragraph((Image((_link("a", "/u"),), "/i.png"),)),)


class TestBracketNesting:
    """Deeply nested brackets parse quickly and resolve to the innermost link."""

    def test_innermost_link_wins(self) -> None:
        depth = 30
        start = time.perf_counter()
        doc = parse("[" * depth + "x" + "](y)" * depth)
        elapsed = time.perf_counter() - start
        assert doc.children == (
            Paragraph((Str("[" * (depth - 1)), _link("x", "y"), Str("](y)" * (depth - 1)))),
        )
        assert elapsed < 2.0

    def test_nested_images(self) -> None:
        depth = 30
        expected: Inline = Str("x")
        for _ in range(depth):
            expected = Image((expected,), "y")
        doc = parse("![" * depth + "x" + "](y)" * depth)
        assert doc.children == (Paragraph((expected,)),)

    def test_beyond_nesting_limit(self) -> None:
        """Brackets past the limit degrade to text instead of recursing."""
        depth = MAX_LINK_NESTING * 3
        doc = parse("[" * depth + "x" + "](y)" * depth)
        assert len(doc.children) == 1
        assert isinstance(doc.children[0], Paragraph)


class TestReferenceLinks:
    def test_shortcut(self) -> None:
        assert parse("[a]\n\n[a]: /u").children == (Paragraph((_link("a", "/u"),)),)

    def test_full(self) -> None:
        assert parse("[text][b]\n\n[b]: /u").children == (Paragraph((_link("text", "/u"),)),)

    def test_collapsed(self) -> None:
        assert parse("[b][]\n\n[b]: /u").children == (Paragraph((_link("b", "/u"),)),)

    def test_definition_before_use(self) -> None:
        assert parse("[a]: /u\n\n[a]").children == (Paragraph((_link("a", "/u"),)),)

    def test_title_forms(self) -> None:
        doc = parse('[a]: /u "t"\n\n[a]')
        assert doc.children == (Paragraph((_link("a", "/u", "t"),)),)

    def test_title_on_next_line(self) -> None:
        doc = parse("[a]:\n/u\n't'\n\n[a]")
        assert doc.children == (Paragraph((_link("a", "/u", "t"),)),)

    def test_first_definition_wins(self) -> None:
        doc = parse("[a]: /one\n[a]: /two\n\n[a]")
        assert doc.children == (Paragraph((_link("a", "/one"),)),)

    def test_labels_are_case_insensitive(self) -> None:
        assert parse("[FOO]: /u\n\n[foo]").children == (Paragraph((_link("foo", "/u"),)),)

    def test_undefined_label_is_literal(self) -> None:
        assert parse("[nope]").children == (Paragraph((Str("[nope]"),)),)

    def test_definition_inside_quote(self) -> None:
        doc = parse("> [a]: /u\n\n[a]")
        assert doc.children == (BlockQuote(()), Paragraph((_link("a", "/u"),)))

    def test_definition_inside_list(self) -> None:
        doc = parse("- [a]: /u\n\n[a]")
        assert doc.children[-1] == Paragraph((_link("a", "/u"),))

    def test_definition_cannot_interrupt_paragraph(self) -> None:
        doc = parse("foo\n[a]: /u\n\n[a]")
        assert doc.children[1] == Paragraph((Str("[a]"),))

    def test_trailing_text_invalidates_definition(self) -> None:
        doc = parse('[a]: /u "t" x\n\n[a]')
        assert isinstance(doc.children[0], Paragraph)
        assert doc.children[1] == Paragraph((Str("[a]"),))

    def test_disabled(self) -> None:
        doc = parse("[a]\n\n[a]: /u", config=ParseConfig(references_enabled=False))
        assert doc.children[0] == Paragraph((Str("[a]"),))
        assert len(doc.children) == 2


class TestLinkReferences:
    def test_add_and_get(self) -> None:
        refs = LinkReferences()
        assert refs.add("Foo", "/u", "t")
        assert refs.get("FOO") == ("/u", "t")
        assert "foo" in refs
        assert len(refs) == 1

    def test_duplicate_is_ignored(self) -> None:
        refs = LinkReferences()
        refs.add("a", "/one", "")
        assert not refs.add("A", "/two", "")
        assert refs.get("a") == ("/one", "")

    def test_blank_label_rejected(self) -> None:
        assert not LinkReferences().add("   ", "/u", "")

    def test_missing(self) -> None:
        assert LinkReferences().get("a") is None

    def test_extract_definitions_returns_rest(self) -> None:
        refs = LinkReferences()
        assert extract_definitions("[a]: /u\n[b]: /v\nrest", refs) == "rest"
        assert len(refs) == 2

    def test_extract_definitions_only_leading(self) -> None:
        refs = LinkReferences()
        assert extract_definitions("text\n[a]: /u", refs) == "text\n[a]: /u"
        assert len(refs) == 0


class TestLinkHelpers:
    def test_normalize_label(self) -> None:
        assert normalize_label("  Foo\n  BAR ") == "foo bar"

    def test_normalize_label_case_folds(self) -> None:
        assert normalize_label("Straße") == normalize_label("STRASSE")

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("<a b>", ("a b", 5)),
            ("a(b)c d", ("a(b)c", 5)),
            ("/u\\)", ("/u)", 4)),
            ("a(b", None),
            ("<a\nb>", None),
            ("", None),
        ],
    )
    def test_parse_link_destination(self, text: str, expected: tuple[str, int] | None) -> None:
        assert parse_link_destination(text, 0) == expected

    def test_parse_link_title(self) -> None:
        assert parse_link_title('"t" x', 0) == ("t", 3)
        assert parse_link_title("(t)", 0) == ("t", 3)

    def test_parse_link_title_missing(self) -> None:
        assert parse_link_title("x", 0) == (None, 0)
