"""Register an extra output format with the writer registry."""

from mdconvert import convert, register_writer
from mdconvert.nodes import Document, Heading
from mdconvert.utils.text import stringify


@register_writer("outline")
def write_outline(doc: Document) -> str:
    lines = [
        "  " * (block.level - 1) + stringify(block.children)
        for block in doc.children
        if isinstance(block, Heading)
    ]
    return "\n".join(lines)


print(convert("# Title\n\ntext\n\n## Part one\n\n## Part two", to="outline"))
