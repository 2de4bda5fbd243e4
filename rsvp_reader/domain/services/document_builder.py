"""Build documents from raw per-page text."""

import logging
from collections.abc import Sequence

from ..entities.document import Document, Page
from ..errors import EmptyDocumentError
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


def build_document(pages_raw: Sequence[str]) -> Document:
    """Tokenize each raw page and assemble a document.

    Pages that yield no tokens are dropped. The surviving pages keep
    their input order; the caller is responsible for passing pages
    already sorted by page number.

    Args:
        pages_raw: Raw text of each page, in reading order.

    Returns:
        Document: The document built from the non-empty pages.

    Raises:
        EmptyDocumentError: If no page contains any token.
    """
    pages: list[Page] = []
    for source_index, raw_text in enumerate(pages_raw):
        tokens = tokenize(raw_text)
        if not tokens:
            logger.debug(f"Dropping page {source_index}: no text")
            continue
        pages.append(Page(tokens=tuple(tokens)))

    if not pages:
        raise EmptyDocumentError()

    return Document(pages=tuple(pages))
