"""Domain services for the reader engine."""

from .document_builder import build_document
from .ingestion_service import IngestionService
from .pacing_clock import PacingClock, compute_interval
from .reader_service import ReaderService
from .tokenizer import tokenize

__all__ = [
    "IngestionService",
    "PacingClock",
    "ReaderService",
    "build_document",
    "compute_interval",
    "tokenize",
]
