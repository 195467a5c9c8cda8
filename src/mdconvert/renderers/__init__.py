"""mdconvert writers.

Writers convert document trees into output formats.

Available Writers:
- LatexWriter: Renders a document as a standalone LaTeX article
- TypstWriter: Renders a document as Typst markup

Thread Safety:
All writers use a StringBuilder local to each write() call.
Safe for concurrent use from multiple threads.

"""

from mdconvert.renderers.latex import LatexWriter
from mdconvert.renderers.protocol import DocumentWriter
from mdconvert.renderers.typst import TypstWriter

__all__ = ["DocumentWriter", "LatexWriter", "TypstWriter"]
