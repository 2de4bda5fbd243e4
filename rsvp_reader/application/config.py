"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.entities import AdvancePolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "rsvp-reader"
    app_version: str = "0.1.0"
    debug: bool = False

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Pacing defaults
    default_words_per_minute: float = 300.0
    default_chunk_size: int = 1

    # Bounds accepted from the control surface
    min_words_per_minute: float = 30.0
    max_words_per_minute: float = 900.0
    max_chunk_size: int = 7

    # Frame driver
    frame_rate: float = 60.0
    advance_policy: AdvancePolicy = AdvancePolicy.FIXED_STEP

    # Display text
    placeholder_text: str = "Upload a document to begin."
    idle_text: str = "Ready"


# Create a singleton instance
settings = Settings()
