"""Parsing subsystem for mdconvert.

Architecture:
The parser runs in two passes. The block pass (``blocks``) feeds lines
through a ``BlockDriver`` whose open builders form a tree of containers and
leaves holding raw text. The inline pass (``inline``) runs an
``InlineParser`` over each leaf's text once link references are known.

Modules:
- scanner: line splitting and indentation scanning (tabs expand to 4 columns)
- charsets: character classes shared by both passes
- references: link reference definitions
- blocks: block builders, their transitions and the driver
- inline: tokenizer, delimiter stack and link parsing

"""
