"""DocumentWriter protocol: the stable interface for output writers.

Any writer that implements ``write(doc) -> str`` conforms to this protocol.
Writers raise ``UnsupportedConstructError`` for nodes their format cannot
express rather than dropping them.

Example:
    from mdconvert.renderers.protocol import DocumentWriter

    def export(writer: DocumentWriter, doc: Document) -> str:
        return writer.write(doc)

"""

from typing import Protocol

from mdconvert.nodes import Document


class DocumentWriter(Protocol):
    """Protocol for document writers.

    Implementations must accept a Document and return the rendered text.
    ``LatexWriter`` and ``TypstWriter`` conform to this protocol.

    """

    def write(self, doc: Document) -> str:
        """Write a Document to a string.

        Args:
            doc: The document to write.

        Returns:
            Rendered string output.

        Raises:
            UnsupportedConstructError: If the document holds a node the
                output format cannot express.

        """
        ...
