"""Typed tree: collect headings and their identifiers for a table of contents."""

from mdconvert import parse
from mdconvert.nodes import Block, BlockQuote, BulletList, Heading, OrderedList
from mdconvert.utils.text import stringify


def headings(blocks: tuple[Block, ...]) -> list[Heading]:
    found: list[Heading] = []
    for block in blocks:
        match block:
            case Heading():
                found.append(block)
            case BlockQuote(children=children):
                found.extend(headings(children))
            case BulletList(items=items) | OrderedList(items=items):
                for item in items:
                    found.extend(headings(item))
    return found


source = """# Introduction

Welcome to the guide.

## Getting Started

First steps.

## Getting Started

Duplicate titles get numbered identifiers.

> ### Quoted heading
"""

print("Table of Contents:")
for heading in headings(parse(source).children):
    indent = "  " * (heading.level - 1)
    print(f"{indent}- [{stringify(heading.children)}](#{heading.identifier})")
