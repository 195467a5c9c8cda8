"""Feature switches for the Markdown reader, carried in a ContextVar.

A ``Converter`` installs its ``ParseConfig`` around each parse; the block
parser, the nested parsers it spawns for quotes and list items, and the inline
parser all read the same value without it being threaded through every call.
Each thread and asyncio task sees its own value.

Usage:
    # In Converter class
    converter = Converter(tables=False)
    doc = converter.parse("| a |")  # Sets config internally via ContextVar

    # Direct parser usage
    from mdconvert.config import set_parse_config, reset_parse_config, ParseConfig

    set_parse_config(ParseConfig(strikethrough_enabled=False))
    try:
        doc = Parser(source).parse()
    finally:
        reset_parse_config()

    # Or use the context manager
    with parse_config_context(ParseConfig(auto_identifiers=False)):
        doc = Parser(source).parse()

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Attributes:
        tables_enabled: Recognize GFM pipe tables
        strikethrough_enabled: Recognize ~strike~ and ~~strike~~ spans
        references_enabled: Collect link reference definitions and resolve
            reference-style links against them
        auto_identifiers: Give every heading a GFM-style identifier

    """

    tables_enabled: bool = True
    strikethrough_enabled: bool = True
    references_enabled: bool = True
    auto_identifiers: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ParseConfig":
        """Create ParseConfig from dictionary.

        Keys that are not fields are dropped, so a larger settings mapping
        can be passed as is.

        Example:
            >>> config = ParseConfig.from_dict({
            ...     "tables_enabled": False,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.tables_enabled
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


_DEFAULT_CONFIG: ParseConfig = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Return the configuration active in this context."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Install ``config`` for the rest of the current context."""
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Go back to the all-features-on default."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Use ``config`` inside the ``with`` block only.

    Example:
        >>> with parse_config_context(ParseConfig(tables_enabled=False)):
        ...     doc = Parser("| a | b |").parse()

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
