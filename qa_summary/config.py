"""Application configuration loaded from environment variables."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy async URL of the durable summaries store, e.g. postgresql+asyncpg://...",
    )
    database_echo: bool = False

    summary_model_id: str = "acceleraqa-orchestrator-v1"

    chunk_size_default: int = 1200
    chunk_size_min: int = 800
    chunk_size_max: int = 2000
    chunk_overlap_default: int = 180
    chunk_overlap_min: int = 100
    chunk_overlap_max: int = 400
    page_token_span: int = 400

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def durable_store_enabled(self) -> bool:
        return bool(self.database_url)


settings = Settings()
