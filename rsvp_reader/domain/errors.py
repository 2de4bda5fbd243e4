"""Errors raised by the reader engine.

None of these are fatal. Each one means the request was rejected and the
engine state was left as it was.
"""


class ReaderError(Exception):
    """Base class for all reader engine errors."""


class EmptyDocumentError(ReaderError, ValueError):
    """Raised when no page of a document contains any text."""

    def __init__(self, message: str = "No textual content found in document"):
        super().__init__(message)


class OutOfRangeError(ReaderError, IndexError):
    """Raised when a seek target is not a valid page index."""

    def __init__(self, page_index: int, page_count: int):
        self.page_index = page_index
        self.page_count = page_count
        super().__init__(
            f"Page index {page_index} out of range (document has {page_count} pages)"
        )


class InvalidParameterError(ReaderError, ValueError):
    """Raised for a non-positive speed, chunk size or elapsed time."""


class DocumentParseError(ReaderError):
    """Raised by a document parser when the uploaded bytes cannot be read."""
