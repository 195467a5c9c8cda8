"""Native serialization: JSON round-trip for document trees.

Documents are written in the Pandoc JSON shape so that the output can be fed
to (and read back from) other tools speaking that format:

    {"pandoc-api-version": [1, 23, 1], "meta": {...}, "blocks": [...]}

Every node is ``{"t": tag, "c": content}``; nodes without content omit ``"c"``.
All output is deterministic (sorted keys).

Example:
    from mdconvert import parse
    from mdconvert.serialization import to_json, from_json

    doc = parse("# Hello **World**")
    json_str = to_json(doc)
    restored = from_json(json_str)
    assert doc == restored

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

from __future__ import annotations

import json
from typing import Any

from mdconvert.errors import ReadError
from mdconvert.nodes import (
    Alignment,
    Attr,
    Block,
    BlockQuote,
    BulletList,
    Caption,
    Cell,
    Citation,
    CitationMode,
    Cite,
    Code,
    CodeBlock,
    ColSpec,
    DefinitionList,
    Div,
    Document,
    Emph,
    Figure,
    Heading,
    Image,
    Inline,
    LineBlock,
    LineBreak,
    Link,
    ListAttributes,
    ListNumberDelim,
    ListNumberStyle,
    Math,
    MathType,
    Note,
    OrderedList,
    Paragraph,
    Plain,
    Quoted,
    QuoteType,
    RawBlock,
    RawInline,
    Row,
    SmallCaps,
    SoftBreak,
    Space,
    Span,
    Str,
    Strikeout,
    Strong,
    Subscript,
    Superscript,
    Table,
    TableBody,
    TableFoot,
    TableHead,
    ThematicBreak,
    Underline,
)

PANDOC_API_VERSION = (1, 23, 1)

# Inline containers that hold nothing but a list of inlines
_SIMPLE_INLINES: dict[str, type] = {
    "Emph": Emph,
    "Strong": Strong,
    "Strikeout": Strikeout,
    "Underline": Underline,
    "Superscript": Superscript,
    "Subscript": Subscript,
    "SmallCaps": SmallCaps,
}
_SIMPLE_INLINE_TAGS: dict[type, str] = {cls: tag for tag, cls in _SIMPLE_INLINES.items()}


# =============================================================================
# Writing
# =============================================================================


def to_dict(doc: Document) -> dict[str, Any]:
    """Convert a document to a JSON-compatible dict in the Pandoc shape."""
    return {
        "pandoc-api-version": list(PANDOC_API_VERSION),
        "meta": dict(doc.meta),
        "blocks": [_write_block(block) for block in doc.children],
    }


def to_json(doc: Document, *, indent: int | None = None) -> str:
    """Serialize a document to a JSON string (sorted keys)."""
    return json.dumps(to_dict(doc), sort_keys=True, ensure_ascii=False, indent=indent)


def _node(tag: str, content: Any = None) -> dict[str, Any]:
    if content is None:
        return {"t": tag}
    return {"t": tag, "c": content}


def _write_attr(attr: Attr) -> list[Any]:
    identifier, classes, pairs = attr
    return [identifier, list(classes), [[key, value] for key, value in pairs]]


def _write_inlines(inlines: tuple[Inline, ...]) -> list[dict[str, Any]]:
    return [_write_inline(inline) for inline in inlines]


def _write_blocks(blocks: tuple[Block, ...]) -> list[dict[str, Any]]:
    return [_write_block(block) for block in blocks]


def _write_inline(node: Inline) -> dict[str, Any]:
    match node:
        case Str(content=content):
            return _node("Str", content)
        case Space():
            return _node("Space")
        case SoftBreak():
            return _node("SoftBreak")
        case LineBreak():
            return _node("LineBreak")
        case Emph() | Strong() | Strikeout() | Underline() | Superscript() | Subscript() | SmallCaps():
            return _node(_SIMPLE_INLINE_TAGS[type(node)], _write_inlines(node.children))
        case Quoted(quote_type=quote_type, children=children):
            return _node("Quoted", [_node(quote_type.value), _write_inlines(children)])
        case Cite(citations=citations, children=children):
            return _node("Cite", [[_write_citation(c) for c in citations], _write_inlines(children)])
        case Code(code=code, attr=attr):
            return _node("Code", [_write_attr(attr), code])
        case Math(math_type=math_type, content=content):
            return _node("Math", [_node(math_type.value), content])
        case RawInline(format=fmt, content=content):
            return _node("RawInline", [fmt, content])
        case Link(children=children, url=url, title=title, attr=attr):
            return _node("Link", [_write_attr(attr), _write_inlines(children), [url, title]])
        case Image(children=children, url=url, title=title, attr=attr):
            return _node("Image", [_write_attr(attr), _write_inlines(children), [url, title]])
        case Note(children=children):
            return _node("Note", _write_blocks(children))
        case Span(children=children, attr=attr):
            return _node("Span", [_write_attr(attr), _write_inlines(children)])
    raise TypeError(f"Not an inline node: {type(node).__name__}")


def _write_citation(citation: Citation) -> dict[str, Any]:
    return {
        "citationId": citation.id,
        "citationPrefix": _write_inlines(citation.prefix),
        "citationSuffix": _write_inlines(citation.suffix),
        "citationMode": _node(citation.mode.value),
        "citationNoteNum": citation.note_num,
        "citationHash": citation.hash,
    }


def _write_block(node: Block) -> dict[str, Any]:
    match node:
        case Plain(children=children):
            return _node("Plain", _write_inlines(children))
        case Paragraph(children=children):
            return _node("Para", _write_inlines(children))
        case LineBlock(lines=lines):
            return _node("LineBlock", [_write_inlines(line) for line in lines])
        case CodeBlock(code=code, attr=attr):
            return _node("CodeBlock", [_write_attr(attr), code])
        case RawBlock(format=fmt, content=content):
            return _node("RawBlock", [fmt, content])
        case BlockQuote(children=children):
            return _node("BlockQuote", _write_blocks(children))
        case OrderedList(items=items, attributes=attributes):
            list_attributes = [
                attributes.start,
                _node(attributes.style.value),
                _node(attributes.delim.value),
            ]
            return _node("OrderedList", [list_attributes, [_write_blocks(i) for i in items]])
        case BulletList(items=items):
            return _node("BulletList", [_write_blocks(item) for item in items])
        case DefinitionList(items=items):
            return _node(
                "DefinitionList",
                [
                    [_write_inlines(term), [_write_blocks(d) for d in definitions]]
                    for term, definitions in items
                ],
            )
        case Heading(level=level, children=children, attr=attr):
            return _node("Header", [level, _write_attr(attr), _write_inlines(children)])
        case ThematicBreak():
            return _node("HorizontalRule")
        case Table():
            return _node("Table", _write_table(node))
        case Figure(children=children, caption=caption, attr=attr):
            return _node(
                "Figure", [_write_attr(attr), _write_caption(caption), _write_blocks(children)]
            )
        case Div(children=children, attr=attr):
            return _node("Div", [_write_attr(attr), _write_blocks(children)])
    raise TypeError(f"Not a block node: {type(node).__name__}")


def _write_caption(caption: Caption) -> list[Any]:
    short = None if caption.short is None else _write_inlines(caption.short)
    return [short, _write_blocks(caption.children)]


def _write_row(row: Row) -> list[Any]:
    cells = [
        [
            _write_attr(cell.attr),
            _node(cell.alignment.value),
            cell.row_span,
            cell.col_span,
            _write_blocks(cell.children),
        ]
        for cell in row.cells
    ]
    return [_write_attr(row.attr), cells]


def _write_table(table: Table) -> list[Any]:
    colspecs = [
        [
            _node(spec.alignment.value),
            _node("ColWidthDefault") if spec.width is None else _node("ColWidth", spec.width),
        ]
        for spec in table.colspecs
    ]
    head = [_write_attr(table.head.attr), [_write_row(row) for row in table.head.rows]]
    bodies = [
        [
            _write_attr(body.attr),
            body.row_head_columns,
            [_write_row(row) for row in body.head],
            [_write_row(row) for row in body.rows],
        ]
        for body in table.bodies
    ]
    foot = [_write_attr(table.foot.attr), [_write_row(row) for row in table.foot.rows]]
    return [_write_attr(table.attr), _write_caption(table.caption), colspecs, head, bodies, foot]


# =============================================================================
# Reading
# =============================================================================


def from_json(text: str) -> Document:
    """Parse a JSON string produced by ``to_json`` (or Pandoc) into a Document.

    Raises:
        ReadError: If the text is not JSON or not a well-formed document.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ReadError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
    return from_dict(data)


def from_dict(data: Any) -> Document:
    """Reconstruct a Document from its Pandoc-shaped dict.

    Raises:
        ReadError: If ``data`` is not a well-formed document; the error's
            ``path`` names the offending value.
    """
    if not isinstance(data, dict):
        raise ReadError("Expected a JSON object", "$")
    blocks = _expect(data, "blocks", list, "$")
    meta = data.get("meta", {})
    if not isinstance(meta, dict):
        raise ReadError("Expected an object", "$.meta")
    return Document(
        children=tuple(_read_block(b, f"$.blocks[{i}]") for i, b in enumerate(blocks)),
        meta=meta,
    )


def _expect(data: dict[str, Any], key: str, kind: type, path: str) -> Any:
    if key not in data:
        raise ReadError(f"Missing {key!r}", path)
    value = data[key]
    if not isinstance(value, kind):
        raise ReadError(f"Expected {kind.__name__} for {key!r}", f"{path}.{key}")
    return value


def _list(value: Any, path: str, length: int | None = None) -> list[Any]:
    if not isinstance(value, list):
        raise ReadError("Expected a list", path)
    if length is not None and len(value) != length:
        raise ReadError(f"Expected {length} elements, got {len(value)}", path)
    return value


def _str(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise ReadError("Expected a string", path)
    return value


def _int(value: Any, path: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ReadError("Expected an integer", path)
    return value


def _tag(value: Any, path: str) -> tuple[str, Any]:
    if not isinstance(value, dict) or not isinstance(value.get("t"), str):
        raise ReadError("Expected a node with a 't' tag", path)
    return value["t"], value.get("c")


def _enum[E](enum: type[E], value: Any, path: str) -> E:
    tag, _ = _tag(value, path)
    try:
        return enum(tag)  # type: ignore[call-arg]
    except ValueError:
        raise ReadError(f"Unknown {enum.__name__} {tag!r}", path) from None


def _read_attr(value: Any, path: str) -> Attr:
    identifier, classes, pairs = _list(value, path, 3)
    return (
        _str(identifier, f"{path}[0]"),
        tuple(_str(c, f"{path}[1][{i}]") for i, c in enumerate(_list(classes, f"{path}[1]"))),
        tuple(
            _read_pair(pair, f"{path}[2][{i}]")
            for i, pair in enumerate(_list(pairs, f"{path}[2]"))
        ),
    )


def _read_pair(value: Any, path: str) -> tuple[str, str]:
    key, val = _list(value, path, 2)
    return _str(key, f"{path}[0]"), _str(val, f"{path}[1]")


def _read_inlines(value: Any, path: str) -> tuple[Inline, ...]:
    return tuple(_read_inline(item, f"{path}[{i}]") for i, item in enumerate(_list(value, path)))


def _read_blocks(value: Any, path: str) -> tuple[Block, ...]:
    return tuple(_read_block(item, f"{path}[{i}]") for i, item in enumerate(_list(value, path)))


def _read_inline(value: Any, path: str) -> Inline:
    tag, content = _tag(value, path)
    c = f"{path}.c"
    match tag:
        case "Str":
            return Str(_str(content, c))
        case "Space":
            return Space()
        case "SoftBreak":
            return SoftBreak()
        case "LineBreak":
            return LineBreak()
        case _ if tag in _SIMPLE_INLINES:
            return _SIMPLE_INLINES[tag](_read_inlines(content, c))
        case "Quoted":
            quote_type, children = _list(content, c, 2)
            return Quoted(
                _enum(QuoteType, quote_type, f"{c}[0]"), _read_inlines(children, f"{c}[1]")
            )
        case "Cite":
            citations, children = _list(content, c, 2)
            return Cite(
                tuple(
                    _read_citation(item, f"{c}[0][{i}]")
                    for i, item in enumerate(_list(citations, f"{c}[0]"))
                ),
                _read_inlines(children, f"{c}[1]"),
            )
        case "Code":
            attr, code = _list(content, c, 2)
            return Code(_str(code, f"{c}[1]"), _read_attr(attr, f"{c}[0]"))
        case "Math":
            math_type, text = _list(content, c, 2)
            return Math(_enum(MathType, math_type, f"{c}[0]"), _str(text, f"{c}[1]"))
        case "RawInline":
            fmt, text = _list(content, c, 2)
            return RawInline(_str(fmt, f"{c}[0]"), _str(text, f"{c}[1]"))
        case "Link" | "Image":
            attr, children, target = _list(content, c, 3)
            url, title = _list(target, f"{c}[2]", 2)
            cls = Link if tag == "Link" else Image
            return cls(
                _read_inlines(children, f"{c}[1]"),
                _str(url, f"{c}[2][0]"),
                _str(title, f"{c}[2][1]"),
                _read_attr(attr, f"{c}[0]"),
            )
        case "Note":
            return Note(_read_blocks(content, c))
        case "Span":
            attr, children = _list(content, c, 2)
            return Span(_read_inlines(children, f"{c}[1]"), _read_attr(attr, f"{c}[0]"))
    raise ReadError(f"Unknown inline type {tag!r}", path)


def _read_citation(value: Any, path: str) -> Citation:
    if not isinstance(value, dict):
        raise ReadError("Expected a citation object", path)
    return Citation(
        id=_str(value.get("citationId"), f"{path}.citationId"),
        prefix=_read_inlines(value.get("citationPrefix", []), f"{path}.citationPrefix"),
        suffix=_read_inlines(value.get("citationSuffix", []), f"{path}.citationSuffix"),
        mode=_enum(CitationMode, value.get("citationMode"), f"{path}.citationMode"),
        note_num=_int(value.get("citationNoteNum", 0), f"{path}.citationNoteNum"),
        hash=_int(value.get("citationHash", 0), f"{path}.citationHash"),
    )


def _read_block(value: Any, path: str) -> Block:
    tag, content = _tag(value, path)
    c = f"{path}.c"
    match tag:
        case "Plain":
            return Plain(_read_inlines(content, c))
        case "Para":
            return Paragraph(_read_inlines(content, c))
        case "LineBlock":
            return LineBlock(
                tuple(
                    _read_inlines(line, f"{c}[{i}]") for i, line in enumerate(_list(content, c))
                )
            )
        case "CodeBlock":
            attr, code = _list(content, c, 2)
            return CodeBlock(_str(code, f"{c}[1]"), _read_attr(attr, f"{c}[0]"))
        case "RawBlock":
            fmt, text = _list(content, c, 2)
            return RawBlock(_str(fmt, f"{c}[0]"), _str(text, f"{c}[1]"))
        case "BlockQuote":
            return BlockQuote(_read_blocks(content, c))
        case "OrderedList":
            attributes, items = _list(content, c, 2)
            start, style, delim = _list(attributes, f"{c}[0]", 3)
            return OrderedList(
                _read_items(items, f"{c}[1]"),
                ListAttributes(
                    start=_int(start, f"{c}[0][0]"),
                    style=_enum(ListNumberStyle, style, f"{c}[0][1]"),
                    delim=_enum(ListNumberDelim, delim, f"{c}[0][2]"),
                ),
            )
        case "BulletList":
            return BulletList(_read_items(content, c))
        case "DefinitionList":
            items = []
            for i, item in enumerate(_list(content, c)):
                term, definitions = _list(item, f"{c}[{i}]", 2)
                items.append(
                    (
                        _read_inlines(term, f"{c}[{i}][0]"),
                        _read_items(definitions, f"{c}[{i}][1]"),
                    )
                )
            return DefinitionList(tuple(items))
        case "Header":
            level, attr, children = _list(content, c, 3)
            return Heading(
                _int(level, f"{c}[0]"),
                _read_inlines(children, f"{c}[2]"),
                _read_attr(attr, f"{c}[1]"),
            )
        case "HorizontalRule":
            return ThematicBreak()
        case "Table":
            return _read_table(content, c)
        case "Figure":
            attr, caption, children = _list(content, c, 3)
            return Figure(
                _read_blocks(children, f"{c}[2]"),
                _read_caption(caption, f"{c}[1]"),
                _read_attr(attr, f"{c}[0]"),
            )
        case "Div":
            attr, children = _list(content, c, 2)
            return Div(_read_blocks(children, f"{c}[1]"), _read_attr(attr, f"{c}[0]"))
    raise ReadError(f"Unknown block type {tag!r}", path)


def _read_items(value: Any, path: str) -> tuple[tuple[Block, ...], ...]:
    return tuple(_read_blocks(item, f"{path}[{i}]") for i, item in enumerate(_list(value, path)))


def _read_caption(value: Any, path: str) -> Caption:
    short, children = _list(value, path, 2)
    return Caption(
        short=None if short is None else _read_inlines(short, f"{path}[0]"),
        children=_read_blocks(children, f"{path}[1]"),
    )


def _read_rows(value: Any, path: str) -> tuple[Row, ...]:
    return tuple(_read_row(row, f"{path}[{i}]") for i, row in enumerate(_list(value, path)))


def _read_row(value: Any, path: str) -> Row:
    attr, cells = _list(value, path, 2)
    return Row(
        cells=tuple(
            _read_cell(cell, f"{path}[1][{i}]") for i, cell in enumerate(_list(cells, f"{path}[1]"))
        ),
        attr=_read_attr(attr, f"{path}[0]"),
    )


def _read_cell(value: Any, path: str) -> Cell:
    attr, alignment, row_span, col_span, children = _list(value, path, 5)
    return Cell(
        children=_read_blocks(children, f"{path}[4]"),
        alignment=_enum(Alignment, alignment, f"{path}[1]"),
        row_span=_int(row_span, f"{path}[2]"),
        col_span=_int(col_span, f"{path}[3]"),
        attr=_read_attr(attr, f"{path}[0]"),
    )


def _read_colspec(value: Any, path: str) -> ColSpec:
    alignment, width = _list(value, path, 2)
    tag, content = _tag(width, f"{path}[1]")
    if tag == "ColWidthDefault":
        parsed_width = None
    elif tag == "ColWidth" and isinstance(content, int | float) and not isinstance(content, bool):
        parsed_width = float(content)
    else:
        raise ReadError(f"Invalid column width {tag!r}", f"{path}[1]")
    return ColSpec(_enum(Alignment, alignment, f"{path}[0]"), parsed_width)


def _read_table(value: Any, path: str) -> Table:
    attr, caption, colspecs, head, bodies, foot = _list(value, path, 6)
    head_attr, head_rows = _list(head, f"{path}[3]", 2)
    foot_attr, foot_rows = _list(foot, f"{path}[5]", 2)

    parsed_bodies = []
    for i, body in enumerate(_list(bodies, f"{path}[4]")):
        body_path = f"{path}[4][{i}]"
        body_attr, row_head_columns, body_head, body_rows = _list(body, body_path, 4)
        parsed_bodies.append(
            TableBody(
                rows=_read_rows(body_rows, f"{body_path}[3]"),
                head=_read_rows(body_head, f"{body_path}[2]"),
                row_head_columns=_int(row_head_columns, f"{body_path}[1]"),
                attr=_read_attr(body_attr, f"{body_path}[0]"),
            )
        )

    return Table(
        colspecs=tuple(
            _read_colspec(spec, f"{path}[2][{i}]")
            for i, spec in enumerate(_list(colspecs, f"{path}[2]"))
        ),
        head=TableHead(
            rows=_read_rows(head_rows, f"{path}[3][1]"),
            attr=_read_attr(head_attr, f"{path}[3][0]"),
        ),
        bodies=tuple(parsed_bodies),
        foot=TableFoot(
            rows=_read_rows(foot_rows, f"{path}[5][1]"),
            attr=_read_attr(foot_attr, f"{path}[5][0]"),
        ),
        caption=_read_caption(caption, f"{path}[1]"),
        attr=_read_attr(attr, f"{path}[0]"),
    )


__all__ = ["PANDOC_API_VERSION", "from_dict", "from_json", "to_dict", "to_json"]
