"""Document entities for the reader engine."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Page(BaseModel):
    """An ordered, non-empty sequence of display tokens.

    Tokens are plain strings: a word, or a word with its punctuation
    attached.
    """

    model_config = ConfigDict(frozen=True)

    tokens: tuple[str, ...] = Field(min_length=1, description="Words on the page")

    @field_validator("tokens")
    @classmethod
    def _no_empty_tokens(cls, tokens: tuple[str, ...]) -> tuple[str, ...]:
        if any(not token for token in tokens):
            raise ValueError("tokens must be non-empty strings")
        return tokens

    def __len__(self) -> int:
        return len(self.tokens)


class Document(BaseModel):
    """An ordered, non-empty sequence of pages.

    Documents are never mutated; ingestion replaces them wholesale.
    """

    model_config = ConfigDict(frozen=True)

    pages: tuple[Page, ...] = Field(min_length=1, description="Pages in reading order")

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def word_count(self) -> int:
        return sum(len(page) for page in self.pages)

    @classmethod
    def placeholder(cls, text: str = "Upload a document to begin.") -> "Document":
        """Single-page document shown before anything has been ingested."""
        return cls(pages=(Page(tokens=tuple(text.split())),))
