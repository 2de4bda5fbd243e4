"""In-process implementation of UploadMailbox."""

import logging
import threading
from typing import Optional

from ..domain.interfaces.upload_mailbox import UploadMailbox

logger = logging.getLogger(__name__)


class SingleSlotMailbox(UploadMailbox):
    """Thread-safe single-slot mailbox.

    A producer overwrites whatever is waiting (last write wins). The
    consumer takes and clears the slot in one step. The lock is only held
    for the swap itself, never while the bytes are being parsed.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._slot: Optional[bytes] = None

    def put(self, data: bytes) -> None:
        """Store a copy of ``data``, replacing any upload not yet taken.

        Args:
            data: The uploaded document bytes.
        """
        payload = bytes(data)
        with self._lock:
            replaced = self._slot is not None
            self._slot = payload
        if replaced:
            logger.warning("Pending upload replaced before it was processed")
        logger.debug(f"Upload of {len(payload)} bytes queued")

    def take(self) -> Optional[bytes]:
        with self._lock:
            data, self._slot = self._slot, None
        return data

    def has_pending(self) -> bool:
        with self._lock:
            return self._slot is not None
