"""Infrastructure layer components."""

from .pdf_document_parser import (
    PdfDocumentParser,
    PlainTextDocumentParser,
    SniffingDocumentParser,
)
from .single_slot_mailbox import SingleSlotMailbox

__all__ = [
    "PdfDocumentParser",
    "PlainTextDocumentParser",
    "SingleSlotMailbox",
    "SniffingDocumentParser",
]
