"""Ingestion service: swaps freshly extracted text into a reader."""

import logging
from collections.abc import Sequence

from ..entities.document import Document
from ..errors import InvalidParameterError
from .document_builder import build_document
from .reader_service import ReaderService

logger = logging.getLogger(__name__)


class IngestionService:
    """Builds documents from raw page text and loads them into a reader."""

    def __init__(self, reader: ReaderService):
        self._reader = reader

    def ingest(self, pages_raw: Sequence[str]) -> Document:
        """Replace the reader's document with one built from ``pages_raw``.

        On success the reader is rewound to the first word and starts
        playing. On failure the reader is left exactly as it was.

        Args:
            pages_raw: Raw text of each page, already in page order.

        Returns:
            Document: The newly loaded document.

        Raises:
            InvalidParameterError: If ``pages_raw`` is a single string or
                contains something other than strings.
            EmptyDocumentError: If no page contains any text.
        """
        if isinstance(pages_raw, (str, bytes)):
            raise InvalidParameterError("pages_raw must be a sequence of page strings")
        if not all(isinstance(raw_text, str) for raw_text in pages_raw):
            raise InvalidParameterError("every page must be a string")

        document = build_document(pages_raw)
        self._reader.load_document(document)
        logger.info(
            f"Document loaded. Pages: {document.page_count} "
            f"(of {len(pages_raw)}), words: {document.word_count}"
        )
        return document
