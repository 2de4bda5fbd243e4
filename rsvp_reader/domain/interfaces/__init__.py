"""Domain interfaces for the reader engine."""

from .document_parser import DocumentParser
from .upload_mailbox import UploadMailbox

__all__ = ["DocumentParser", "UploadMailbox"]
