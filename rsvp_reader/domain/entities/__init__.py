"""Domain entities for the reader engine."""

from .document import Document, Page
from .reader_state import (
    AdvancePolicy,
    Cursor,
    DisplayChunk,
    PacingConfig,
    PlaybackMode,
    ReaderSnapshot,
)

__all__ = [
    # Document entities
    "Document",
    "Page",
    # Reader state entities
    "AdvancePolicy",
    "Cursor",
    "DisplayChunk",
    "PacingConfig",
    "PlaybackMode",
    "ReaderSnapshot",
]
