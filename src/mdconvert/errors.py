"""Exception classes for mdconvert.

Markdown parsing never fails on text input: malformed constructs fall back to
literal text. Errors come from the edges of the system, namely reading a
structural (JSON) document and writing a tree to a format that cannot express
some construct.
"""

from __future__ import annotations


class MdConvertError(Exception):
    """Base exception for all mdconvert errors.

    Subclass this for specific error categories.
    """

    pass


class ReadError(MdConvertError, ValueError):
    """Error while reading a native (JSON) document.

    Raised when the input is not a well-formed document tree.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        """Initialize read error with the location of the bad value.

        Args:
            message: Error description
            path: JSON path of the offending value (e.g. "blocks[2].c[1]")
        """
        self.message = message
        self.path = path

        location = f"{path}: " if path else ""
        super().__init__(f"{location}{message}")


class RenderError(MdConvertError):
    """Error while writing a document to an output format."""

    pass


class UnsupportedConstructError(RenderError):
    """A node has no representation in the requested output format.

    Writers raise this instead of dropping content silently.
    """

    def __init__(self, construct: str, output_format: str) -> None:
        """Initialize unsupported construct error.

        Args:
            construct: Node type name (e.g., "DefinitionList", "Math")
            output_format: Writer name (e.g., "latex")
        """
        self.construct = construct
        self.output_format = output_format
        super().__init__(f"{construct} is not supported by the {output_format} writer")
