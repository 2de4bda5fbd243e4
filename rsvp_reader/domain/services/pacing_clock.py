"""Pacing clock: turns elapsed wall-clock time into reveal intervals."""

from ..entities.reader_state import PacingConfig
from ..errors import InvalidParameterError


def compute_interval(words_per_minute: float, chunk_size: int) -> float:
    """Seconds between two reveals of ``chunk_size`` words at the given rate."""
    if not words_per_minute > 0:
        raise InvalidParameterError(f"words_per_minute must be > 0, got {words_per_minute}")
    if chunk_size < 1:
        raise InvalidParameterError(f"chunk_size must be >= 1, got {chunk_size}")
    return (60.0 / words_per_minute) * chunk_size


class PacingClock:
    """Accumulates elapsed time and reports how many intervals have passed.

    The clock knows nothing about playback. The reader simply stops
    feeding it time while paused, so paused time never counts.
    """

    def __init__(self, pacing: PacingConfig):
        self._interval = compute_interval(pacing.words_per_minute, pacing.chunk_size)
        self._accumulated = 0.0
        # Intervals that fit after a speed-up, delivered by the next advance().
        self._pending = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def accumulated(self) -> float:
        return self._accumulated

    @property
    def pending(self) -> int:
        return self._pending

    def advance(self, elapsed: float) -> int:
        """Add ``elapsed`` seconds and return the number of intervals consumed.

        Raises:
            InvalidParameterError: If ``elapsed`` is negative.
        """
        if elapsed < 0:
            raise InvalidParameterError(f"elapsed must be >= 0, got {elapsed}")

        self._accumulated += elapsed
        fired = self._pending + self._consume()
        self._pending = 0
        return fired

    def reconfigure(self, pacing: PacingConfig) -> int:
        """Switch to a new interval, keeping partial progress.

        If the accumulated time already covers one or more of the new
        intervals they fire at once. They are also held as pending and
        returned by the next ``advance`` call.

        Returns:
            int: The number of intervals fired by the change.
        """
        self._interval = compute_interval(pacing.words_per_minute, pacing.chunk_size)
        fired = self._consume()
        self._pending += fired
        return fired

    def reset(self) -> None:
        """Discard accumulated time and pending intervals."""
        self._accumulated = 0.0
        self._pending = 0

    def _consume(self) -> int:
        fired = int(self._accumulated // self._interval)
        self._accumulated = max(0.0, self._accumulated - fired * self._interval)
        # Floor division can come out one interval short.
        if self._accumulated >= self._interval:
            fired += 1
            self._accumulated = max(0.0, self._accumulated - self._interval)
        return fired
