"""Reader state entities: cursor, pacing, playback and display chunks."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PlaybackMode(str, Enum):
    """Playback mode of the reader."""
    PLAYING = "playing"
    PAUSED = "paused"


class AdvancePolicy(str, Enum):
    """How many chunks a tick reveals when several intervals elapsed at once."""
    FIXED_STEP = "fixed_step"
    CATCH_UP = "catch_up"


class Cursor(BaseModel):
    """Current reading position.

    ``word_index`` may equal the page length, meaning the page is
    exhausted and the next advancement moves on to the following page.
    """

    model_config = ConfigDict(frozen=True)

    page_index: int = Field(default=0, ge=0)
    word_index: int = Field(default=0, ge=0)


class PacingConfig(BaseModel):
    """Reveal rate: words per minute and words per reveal."""

    model_config = ConfigDict(frozen=True)

    words_per_minute: float = Field(default=300.0, gt=0, allow_inf_nan=False)
    chunk_size: int = Field(default=1, ge=1)

    @property
    def interval_seconds(self) -> float:
        return (60.0 / self.words_per_minute) * self.chunk_size


class DisplayChunk(BaseModel):
    """Text revealed at one pacing interval, with the word range it covers."""

    model_config = ConfigDict(frozen=True)

    text: str
    page_index: int = Field(ge=0)
    start: int = Field(ge=0, description="First word index, inclusive")
    end: int = Field(ge=0, description="Last word index, exclusive")


class ReaderSnapshot(BaseModel):
    """Read-only view of the reader for control surfaces."""

    mode: PlaybackMode
    page_index: int
    page_count: int
    word_index: int
    page_length: int
    progress: float = Field(ge=0.0, le=1.0)
    words_per_minute: float
    chunk_size: int
    interval_seconds: float
    current_text: str
    last_warning: Optional[str] = None
