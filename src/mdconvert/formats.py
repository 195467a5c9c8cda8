"""Reader and writer registry keyed by format name.

Readers turn text into a Document, writers turn a Document into text.
Built-in formats:

- Readers: ``markdown`` (alias ``gfm``), ``json`` (alias ``native``)
- Writers: ``latex``, ``typst``, ``json`` (alias ``native``)

Usage:
    >>> from mdconvert.formats import convert
    >>> print(convert("*hi*", target="typst"))
    <BLANKLINE>
    _hi_
    <BLANKLINE>

Additional formats register with the decorators:

    @register_writer("json-pretty")
    def write_pretty_json(doc: Document) -> str:
        return to_json(doc, indent=2)

Thread Safety:
The registries are filled at import time and only read afterwards.

"""

from __future__ import annotations

from collections.abc import Callable

from mdconvert.nodes import Document
from mdconvert.parser import Parser
from mdconvert.renderers import LatexWriter, TypstWriter
from mdconvert.serialization import from_json, to_json
from mdconvert.utils.logger import get_logger

logger = get_logger(__name__)

__all__ = [
    "READERS",
    "WRITERS",
    "convert",
    "get_reader",
    "get_writer",
    "read",
    "register_reader",
    "register_writer",
    "write",
]

type Reader = Callable[[str], Document]
type Writer = Callable[[Document], str]

READERS: dict[str, Reader] = {}
WRITERS: dict[str, Writer] = {}


def register_reader(*names: str) -> Callable[[Reader], Reader]:
    """Decorator to register a reader under one or more format names."""

    def decorator(func: Reader) -> Reader:
        for name in names:
            READERS[name] = func
        return func

    return decorator


def register_writer(*names: str) -> Callable[[Writer], Writer]:
    """Decorator to register a writer under one or more format names."""

    def decorator(func: Writer) -> Writer:
        for name in names:
            WRITERS[name] = func
        return func

    return decorator


def _lookup[T](registry: dict[str, T], kind: str, name: str) -> T:
    logger.debug("Looking up %s %r", kind, name)
    if name not in registry:
        available = ", ".join(sorted(registry))
        raise KeyError(f"Unknown {kind}: {name!r}. Available: {available}")
    return registry[name]


def get_reader(name: str) -> Reader:
    """Get a reader by format name.

    Raises:
        KeyError: If the format has no reader

    """
    return _lookup(READERS, "reader", name)


def get_writer(name: str) -> Writer:
    """Get a writer by format name.

    Raises:
        KeyError: If the format has no writer

    """
    return _lookup(WRITERS, "writer", name)


def read(name: str, text: str) -> Document:
    return get_reader(name)(text)


def write(name: str, doc: Document) -> str:
    return get_writer(name)(doc)


def convert(text: str, source: str = "markdown", target: str = "json") -> str:
    """Read ``text`` in the source format and write it in the target format.

    Both names are resolved before any work is done, so an unknown target
    fails without parsing the input.
    """
    reader = get_reader(source)
    writer = get_writer(target)
    return writer(reader(text))


# =============================================================================
# Built-in formats
# =============================================================================


@register_reader("markdown", "gfm")
def read_markdown(text: str) -> Document:
    return Parser(text).parse()


@register_reader("json", "native")
def read_json(text: str) -> Document:
    return from_json(text)


@register_writer("json", "native")
def write_json(doc: Document) -> str:
    return to_json(doc)


@register_writer("latex")
def write_latex(doc: Document) -> str:
    return LatexWriter().write(doc)


@register_writer("typst")
def write_typst(doc: Document) -> str:
    return TypstWriter().write(doc)
