from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment/.env."""

    environment: str = Field(default="dev")
    database_url: str = Field(default="sqlite:///data/dev.db")
    fixture_path: Path = Field(default=Path("data/fixtures/mock_dataset.json"))
    log_level: str = Field(default="INFO")
    upcoming_window_days: int = Field(default=7)
    recent_window_days: int = Field(default=30)
    generation_delay_seconds: float = Field(default=2.0)
    upload_step_delay_seconds: float = Field(default=0.1)
    high_relevance_threshold: int = Field(default=80)

    model_config = SettingsConfigDict(
        env_prefix="CASEINTAKE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
