"""Block-level parsing.

The first pass reads the source line by line through a ``BlockDriver`` and
produces a tree of builders; the second pass (``build``) turns the builders
into document blocks once link reference definitions are known.

Submodules refer to each other as modules (``dispatch.classify(...)``) since
containers and recognizers are mutually recursive.
"""
