"""
Configuration settings for the ir-engine session core.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Session
    # ========================================
    session_strategy: Literal["JD1", "Anki"] = Field(
        default="JD1",
        description="Ranking strategy used to order candidates",
    )
    session_scheduler: Literal["fsrs", "sm2"] = Field(
        default="fsrs",
        description="Scheduler used to grade non-topic items",
    )
    session_clump_limit: int = Field(
        default=3,
        ge=1,
        description="Max consecutive items from the same note",
    )
    session_cooldown: int = Field(
        default=5,
        ge=0,
        description="Other items that must be shown before an 'Again' item returns",
    )
    session_new_cards_limit: int | None = Field(
        default=None,
        ge=0,
        description="Max new items per loaded pool (None for unlimited)",
    )
    session_deterministic: bool = Field(
        default=False,
        description="Disable probabilistic interleaving (always pick rank 1)",
    )
    session_seed: int | None = Field(
        default=None,
        description="Seed for the interleaving RNG (None uses the clock)",
    )
    session_exam_date: datetime | None = Field(
        default=None,
        description="Exam date; due dates are pulled in to fit 6 reviews before it",
    )

    # ========================================
    # FSRS Settings (for spaced repetition)
    # ========================================
    fsrs_request_retention: float = Field(
        default=0.9,
        gt=0.0,
        lt=1.0,
        description="Target retention rate for scheduling",
    )
    fsrs_maximum_interval: int = Field(
        default=365,
        ge=1,
        description="Longest interval the scheduler may assign (days)",
    )
    fsrs_weights: list[float] | None = Field(
        default=None,
        description="Custom FSRS weight vector (None for library defaults)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def get_scheduling_params(self) -> dict[str, object]:
        """Get FSRS scheduling parameters as a dictionary."""
        return {
            "maximum_interval": self.fsrs_maximum_interval,
            "request_retention": self.fsrs_request_retention,
            "weights": self.fsrs_weights,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
