"""PDF and plain-text implementations of DocumentParser."""

import io
import logging

from PyPDF2 import PdfReader

from ..domain.errors import DocumentParseError
from ..domain.interfaces.document_parser import DocumentParser

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"
PAGE_BREAK = "\f"


class PdfDocumentParser(DocumentParser):
    """Extracts per-page text from PDF bytes with PyPDF2.

    A page whose text cannot be extracted is reported as empty, so it is
    dropped later like any other page without text.
    """

    def parse(self, data: bytes) -> dict[int, str]:
        """Extract the text of every page of a PDF.

        Args:
            data: The PDF file content.

        Returns:
            dict[int, str]: Page text keyed by 1-based page number.

        Raises:
            DocumentParseError: If the bytes are not a readable PDF.
        """
        try:
            pdf_reader = PdfReader(io.BytesIO(data))
            pdf_pages = list(pdf_reader.pages)
        except Exception as e:
            raise DocumentParseError(f"Failed to load PDF: {e}") from e

        pages: dict[int, str] = {}
        for page_number, pdf_page in enumerate(pdf_pages, start=1):
            try:
                pages[page_number] = pdf_page.extract_text() or ""
            except Exception as e:
                logger.warning(f"Could not extract text from page {page_number}: {e}")
                pages[page_number] = ""

        logger.debug(f"Extracted text from {len(pages)} PDF pages")
        return pages


class PlainTextDocumentParser(DocumentParser):
    """Reads UTF-8 text, with form feeds separating pages."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def parse(self, data: bytes) -> dict[int, str]:
        try:
            text = data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise DocumentParseError(f"Failed to decode text as {self.encoding}: {e}") from e

        return {
            page_number: page_text
            for page_number, page_text in enumerate(text.split(PAGE_BREAK), start=1)
        }


class SniffingDocumentParser(DocumentParser):
    """Dispatches to the PDF parser for ``%PDF`` bytes, else to plain text."""

    def __init__(
        self,
        pdf_parser: DocumentParser | None = None,
        text_parser: DocumentParser | None = None,
    ):
        self.pdf_parser = pdf_parser or PdfDocumentParser()
        self.text_parser = text_parser or PlainTextDocumentParser()

    def parse(self, data: bytes) -> dict[int, str]:
        if data.lstrip()[:len(PDF_MAGIC)] == PDF_MAGIC:
            return self.pdf_parser.parse(data)
        return self.text_parser.parse(data)
