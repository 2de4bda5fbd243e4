"""Document parser protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class DocumentParser(Protocol):
    """Protocol for turning uploaded document bytes into per-page text.

    Implementations own the binary format entirely. The reader engine only
    ever sees the extracted text of each page.
    """

    def parse(self, data: bytes) -> dict[int, str]:
        """Extract the raw text of every page.

        Args:
            data: The uploaded document bytes.

        Returns:
            dict[int, str]: Raw page text keyed by page number (1-based).
                A page with no extractable text maps to an empty string.

        Raises:
            DocumentParseError: If the bytes cannot be read as a document.
        """
        ...
