"""Tests for ContextVar-based parse configuration.

Validates thread isolation, context manager behavior, and that nested
container blocks see the same config as the top level.
"""

from threading import Thread

import pytest

from mdconvert import (
    Converter,
    ParseConfig,
    Parser,
    get_parse_config,
    parse,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from mdconvert.nodes import BlockQuote, Heading, Paragraph, Str, Table


class TestParseConfigDataclass:
    """Test ParseConfig frozen dataclass behavior."""

    def test_default_values(self) -> None:
        """Every GFM feature is on by default."""
        config = ParseConfig()
        assert config.tables_enabled is True
        assert config.strikethrough_enabled is True
        assert config.references_enabled is True
        assert config.auto_identifiers is True

    def test_immutability(self) -> None:
        config = ParseConfig()
        with pytest.raises(AttributeError):
            config.tables_enabled = False  # type: ignore[misc]

    def test_from_dict(self) -> None:
        config = ParseConfig.from_dict({"tables_enabled": False, "unknown_key": "ignored"})
        assert config == ParseConfig(tables_enabled=False)

    def test_from_empty_dict(self) -> None:
        assert ParseConfig.from_dict({}) == ParseConfig()


class TestContextVarFunctions:
    """Test get/set/reset functions."""

    def teardown_method(self) -> None:
        reset_parse_config()

    def test_default_config(self) -> None:
        assert get_parse_config() == ParseConfig()

    def test_set_and_get(self) -> None:
        custom = ParseConfig(tables_enabled=False, auto_identifiers=False)
        set_parse_config(custom)
        assert get_parse_config() is custom

    def test_reset_restores_default(self) -> None:
        set_parse_config(ParseConfig(tables_enabled=False))
        reset_parse_config()
        assert get_parse_config().tables_enabled is True


class TestParseConfigContext:
    """Test parse_config_context context manager."""

    def test_context_sets_config(self) -> None:
        with parse_config_context(ParseConfig(tables_enabled=False)):
            assert get_parse_config().tables_enabled is False
        assert get_parse_config().tables_enabled is True

    def test_nested_contexts(self) -> None:
        with parse_config_context(ParseConfig(tables_enabled=False)):
            with parse_config_context(ParseConfig(strikethrough_enabled=False)):
                assert get_parse_config().strikethrough_enabled is False
                # The inner config replaces the outer one entirely
                assert get_parse_config().tables_enabled is True
            assert get_parse_config().tables_enabled is False
        assert get_parse_config() == ParseConfig()

    def test_context_restores_on_exception(self) -> None:
        with pytest.raises(ValueError, match="test"):
            with parse_config_context(ParseConfig(tables_enabled=False)):
                raise ValueError("test")
        assert get_parse_config().tables_enabled is True


class TestFeatureSwitches:
    """Each switch changes what the parser produces."""

    def test_tables_disabled(self) -> None:
        doc = Converter(tables=False).parse("a|b\n-|-")
        assert not any(isinstance(block, Table) for block in doc.children)

    def test_tables_disabled_inside_quote(self) -> None:
        """Nested drivers read the same config as the top level."""
        with parse_config_context(ParseConfig(tables_enabled=False)):
            doc = Parser("> a|b\n> -|-").parse()
        quote = doc.children[0]
        assert isinstance(quote, BlockQuote)
        assert isinstance(quote.children[0], Paragraph)

    def test_strikethrough_disabled(self) -> None:
        doc = Converter(strikethrough=False).parse("~~a~~")
        assert doc.children == (Paragraph((Str("~~a~~"),)),)

    def test_references_disabled(self) -> None:
        doc = Converter(references=False).parse("[a]\n\n[a]: /u")
        assert doc.children[0] == Paragraph((Str("[a]"),))

    def test_auto_identifiers_disabled(self) -> None:
        heading = Converter(auto_identifiers=False).parse("# Title").children[0]
        assert isinstance(heading, Heading)
        assert heading.identifier == ""

    def test_parse_with_config_argument(self) -> None:
        doc = parse("~a~", config=ParseConfig(strikethrough_enabled=False))
        assert doc.children == (Paragraph((Str("~a~"),)),)
        assert get_parse_config() == ParseConfig()


class TestThreadIsolation:
    """Test thread-local configuration isolation."""

    def test_thread_isolation(self) -> None:
        """Each thread sees its own config."""
        results: dict[int, bool] = {}

        def worker(thread_id: int, config: ParseConfig) -> None:
            set_parse_config(config)
            results[thread_id] = get_parse_config().tables_enabled

        configs = [ParseConfig(tables_enabled=i % 2 == 0) for i in range(4)]
        threads = [Thread(target=worker, args=(i, c)) for i, c in enumerate(configs)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == {0: True, 1: False, 2: True, 3: False}
        # The main thread is untouched
        assert get_parse_config() == ParseConfig()

    def test_concurrent_converters(self) -> None:
        """Converters with different settings can run side by side."""
        results: dict[int, bool] = {}
        source = "| a | b |\n|---|---|\n| 1 | 2 |"

        def worker(thread_id: int, with_tables: bool) -> None:
            doc = Converter(tables=with_tables).parse(source)
            results[thread_id] = isinstance(doc.children[0], Table)

        threads = [Thread(target=worker, args=(i, i % 2 == 0)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == {i: i % 2 == 0 for i in range(8)}
