"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Uploads
    upload_dir: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024

    # Chunking (words)
    chunk_window_words: int = 1000
    chunk_overlap_words: int = 100

    # Search
    search_default_limit: int = 10
    search_max_limit: int = 50
    relevant_chunks_per_result: int = 3

    # Listing
    list_default_page_size: int = 20

    # Timeouts (milliseconds)
    extraction_timeout_ms: int = 30000

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
