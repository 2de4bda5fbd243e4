"""Reader controller: composition root, frame driver and control surface."""

import asyncio
import logging
import time
from typing import Optional

from ..domain.entities import (
    DisplayChunk,
    Document,
    PacingConfig,
    PlaybackMode,
    ReaderSnapshot,
)
from ..domain.errors import DocumentParseError, EmptyDocumentError
from ..domain.interfaces.document_parser import DocumentParser
from ..domain.interfaces.upload_mailbox import UploadMailbox
from ..domain.services import IngestionService, ReaderService
from .config import Settings

logger = logging.getLogger(__name__)


class ReaderController:
    """
    Coordinates the reader engine with its external collaborators.

    The controller is injected with the mailbox and parser, and owns the
    reader and ingestion services. It is the only caller of the engine,
    so the API layer stays thin and never touches engine state directly.
    """

    def __init__(
        self,
        reader: ReaderService,
        mailbox: UploadMailbox,
        parser: DocumentParser,
        frame_rate: float = 60.0,
    ):
        """
        Initialize the controller with injected dependencies.

        Args:
            reader: The reader state machine to drive
            mailbox: Single-slot hand-off for uploaded bytes
            parser: Collaborator turning uploaded bytes into page text
            frame_rate: Frames per second used by ``run_frame_loop``
        """
        self.reader = reader
        self.ingestion = IngestionService(reader)
        self.mailbox = mailbox
        self.parser = parser
        self.frame_rate = frame_rate
        self.last_warning: Optional[str] = None
        self._subscribers: list[asyncio.Queue[DisplayChunk]] = []

        logger.info("ReaderController initialized")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        mailbox: UploadMailbox,
        parser: DocumentParser,
    ) -> "ReaderController":
        reader = ReaderService(
            document=Document.placeholder(settings.placeholder_text),
            pacing=PacingConfig(
                words_per_minute=settings.default_words_per_minute,
                chunk_size=settings.default_chunk_size,
            ),
            advance_policy=settings.advance_policy,
            idle_text=settings.idle_text,
        )
        return cls(reader=reader, mailbox=mailbox, parser=parser, frame_rate=settings.frame_rate)

    # ===== Uploads =====

    def receive_upload(self, data: bytes) -> None:
        """Hand uploaded bytes to the frame driver. Safe from any thread."""
        self.mailbox.put(data)

    def poll_uploads(self) -> Optional[Document]:
        """Take a pending upload, if any, and ingest it.

        Parse and ingestion failures are logged and kept in
        ``last_warning``; the current document stays active.

        Returns:
            Optional[Document]: The newly loaded document, or None.
        """
        data = self.mailbox.take()
        if data is None:
            return None

        logger.info(f"Processing upload ({len(data)} bytes)...")
        try:
            pages = self.parser.parse(data)
            document = self.ingestion.ingest([pages[number] for number in sorted(pages)])
        except DocumentParseError as e:
            logger.error(f"Failed to load document: {e}")
            self.last_warning = str(e)
            return None
        except EmptyDocumentError as e:
            logger.error("Document contained no text.")
            self.last_warning = str(e)
            return None

        self.last_warning = None
        logger.info(f"Document parsed. Pages: {document.page_count}")
        return document

    # ===== Frame driver =====

    def frame(self, elapsed: float) -> Optional[DisplayChunk]:
        """Run one frame: ingest at most one upload, then tick the reader."""
        self.poll_uploads()
        chunk = self.reader.tick(elapsed)
        if chunk is not None:
            self._publish(chunk)
        return chunk

    async def run_frame_loop(self, stop_event: asyncio.Event) -> None:
        """Call ``frame`` at ``frame_rate`` until ``stop_event`` is set."""
        frame_period = 1.0 / self.frame_rate
        last = time.monotonic()
        logger.info(f"Frame loop started at {self.frame_rate:.0f} fps")
        try:
            while not stop_event.is_set():
                now = time.monotonic()
                try:
                    self.frame(now - last)
                except Exception as e:
                    logger.error(f"Error running frame: {e}", exc_info=True)
                last = now
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=frame_period)
                except asyncio.TimeoutError:
                    continue
        finally:
            logger.info("Frame loop stopped")

    def subscribe(self) -> asyncio.Queue:
        """Return a queue receiving every chunk revealed from now on."""
        queue: asyncio.Queue[DisplayChunk] = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def _publish(self, chunk: DisplayChunk) -> None:
        for queue in self._subscribers:
            queue.put_nowait(chunk)

    # ===== Control surface =====

    def toggle_play_pause(self) -> PlaybackMode:
        return self.reader.toggle_play_pause()

    def seek_to_page(self, page_index: int) -> None:
        self.reader.seek_to_page(page_index)

    def set_pacing(self, words_per_minute: float, chunk_size: int) -> None:
        self.reader.set_pacing(words_per_minute, chunk_size)

    def snapshot(self) -> ReaderSnapshot:
        return self.reader.snapshot().model_copy(update={"last_warning": self.last_warning})

    def get_health_status(self) -> dict:
        """
        Get application health status.

        Returns:
            Dict containing health status information
        """
        return {
            "status": "healthy",
            "mode": self.reader.mode.value,
            "pages": self.reader.page_count,
            "upload_pending": self.mailbox.has_pending(),
            "collaborators": {
                "mailbox": type(self.mailbox).__name__,
                "parser": type(self.parser).__name__,
            },
        }
