"""Upload mailbox protocol."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class UploadMailbox(Protocol):
    """Single-slot hand-off for uploaded document bytes.

    ``put`` may be called from any thread. ``take`` is called once per
    frame by the frame driver.
    """

    def put(self, data: bytes) -> None:
        """Store bytes in the slot, replacing anything not yet taken."""
        ...

    def take(self) -> Optional[bytes]:
        """Return the pending bytes and clear the slot, or None if empty."""
        ...

    def has_pending(self) -> bool:
        """Return True if bytes are waiting to be taken."""
        ...
