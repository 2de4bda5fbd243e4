"""Reader service: the playback state machine of the RSVP engine."""

import logging
from typing import Optional

from pydantic import ValidationError

from ..entities.document import Document
from ..entities.reader_state import (
    AdvancePolicy,
    Cursor,
    DisplayChunk,
    PacingConfig,
    PlaybackMode,
    ReaderSnapshot,
)
from ..errors import InvalidParameterError, OutOfRangeError
from .pacing_clock import PacingClock

logger = logging.getLogger(__name__)


class ReaderService:
    """
    Owns the reading position, playback mode and pacing of one reader.

    This service owns:
    - The current document (replaced wholesale by ``load_document``)
    - The cursor (page index, word index)
    - The pacing config and the clock derived from it
    - The playback mode
    - The text of the last revealed chunk

    Every operation runs to completion without blocking and must be
    called from a single owner, normally once per frame. Validation
    always happens before mutation, so a rejected call changes nothing.
    """

    def __init__(
        self,
        document: Optional[Document] = None,
        pacing: Optional[PacingConfig] = None,
        advance_policy: AdvancePolicy = AdvancePolicy.FIXED_STEP,
        idle_text: str = "Ready",
    ):
        self._document: Document = document or Document.placeholder()
        self._pacing: PacingConfig = pacing or PacingConfig()
        self._clock = PacingClock(self._pacing)
        self._cursor = Cursor()
        self._mode = PlaybackMode.PAUSED
        self.advance_policy = advance_policy
        self._current_text = idle_text

    # ===== Accessors =====

    @property
    def document(self) -> Document:
        return self._document

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    @property
    def pacing(self) -> PacingConfig:
        return self._pacing

    @property
    def mode(self) -> PlaybackMode:
        return self._mode

    @property
    def clock(self) -> PacingClock:
        return self._clock

    @property
    def current_text(self) -> str:
        return self._current_text

    @property
    def page_count(self) -> int:
        return self._document.page_count

    def progress(self) -> float:
        """Fraction of the current page already revealed, in [0, 1]."""
        page_length = len(self._document.pages[self._cursor.page_index])
        return min(1.0, self._cursor.word_index / max(1, page_length))

    def snapshot(self) -> ReaderSnapshot:
        return ReaderSnapshot(
            mode=self._mode,
            page_index=self._cursor.page_index,
            page_count=self.page_count,
            word_index=self._cursor.word_index,
            page_length=len(self._document.pages[self._cursor.page_index]),
            progress=self.progress(),
            words_per_minute=self._pacing.words_per_minute,
            chunk_size=self._pacing.chunk_size,
            interval_seconds=self._clock.interval,
            current_text=self._current_text,
        )

    # ===== Controls =====

    def toggle_play_pause(self) -> PlaybackMode:
        """Switch between playing and paused and return the new mode."""
        if self._mode == PlaybackMode.PLAYING:
            self._mode = PlaybackMode.PAUSED
        else:
            self._mode = PlaybackMode.PLAYING
        logger.debug(f"Playback mode is now {self._mode.value}")
        return self._mode

    def seek_to_page(self, page_index: int) -> None:
        """Move the cursor to the start of ``page_index``.

        Raises:
            OutOfRangeError: If ``page_index`` is not an integer index of
                an existing page.
        """
        if isinstance(page_index, bool) or not isinstance(page_index, int):
            raise OutOfRangeError(page_index, self.page_count)
        if not 0 <= page_index < self.page_count:
            raise OutOfRangeError(page_index, self.page_count)
        self._cursor = Cursor(page_index=page_index, word_index=0)
        logger.debug(f"Seeked to page {page_index}")

    def set_pacing(self, words_per_minute: float, chunk_size: int) -> None:
        """Change the reveal rate.

        Partial progress towards the next reveal is kept. When the new
        interval is already covered by it, the next tick reveals at once.

        Raises:
            InvalidParameterError: If ``words_per_minute`` is not a positive
                finite number or ``chunk_size`` is less than 1.
        """
        try:
            pacing = PacingConfig(words_per_minute=words_per_minute, chunk_size=chunk_size)
        except ValidationError as e:
            raise InvalidParameterError(
                f"Invalid pacing (words_per_minute={words_per_minute}, chunk_size={chunk_size})"
            ) from e

        self._pacing = pacing
        fired = self._clock.reconfigure(pacing)
        logger.info(
            f"Pacing set to {pacing.words_per_minute:.0f} WPM, {pacing.chunk_size} words per chunk"
            + (f" ({fired} interval(s) already elapsed)" if fired else "")
        )

    def load_document(self, document: Document) -> None:
        """Replace the document, rewind to the start and begin playing.

        Pacing is kept. The clock is reset so time spent on the previous
        document does not count towards the first reveal.
        """
        self._document = document
        self._cursor = Cursor()
        self._clock.reset()
        self._mode = PlaybackMode.PLAYING

    # ===== Frame advancement =====

    def tick(self, elapsed: float) -> Optional[DisplayChunk]:
        """Advance playback by ``elapsed`` seconds of wall-clock time.

        Returns:
            Optional[DisplayChunk]: The chunk to display now, or None if
                nothing new is due (paused, interval not yet elapsed, or
                end of document reached on this tick).

        Raises:
            InvalidParameterError: If ``elapsed`` is negative.
        """
        if self._mode == PlaybackMode.PAUSED or not self._document.pages:
            return None

        fired = self._clock.advance(elapsed)
        if fired == 0:
            return None

        steps = fired if self.advance_policy == AdvancePolicy.CATCH_UP else 1
        chunk: Optional[DisplayChunk] = None
        for _ in range(steps):
            revealed = self._reveal_next_chunk()
            if revealed is None:
                break
            chunk = revealed
        return chunk

    def _reveal_next_chunk(self) -> Optional[DisplayChunk]:
        pages = self._document.pages
        while True:
            page_index = self._cursor.page_index
            word_index = self._cursor.word_index
            page = pages[page_index]

            if word_index < len(page):
                end = min(word_index + self._pacing.chunk_size, len(page))
                chunk = DisplayChunk(
                    text=" ".join(page.tokens[word_index:end]),
                    page_index=page_index,
                    start=word_index,
                    end=end,
                )
                self._cursor = Cursor(page_index=page_index, word_index=end)
                self._current_text = chunk.text
                return chunk

            if page_index + 1 < len(pages):
                self._cursor = Cursor(page_index=page_index + 1, word_index=0)
                logger.debug(f"Rolled over to page {page_index + 1}")
                continue

            self._mode = PlaybackMode.PAUSED
            logger.info("End of document reached, playback paused")
            return None
