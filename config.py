"""
Configuration settings for the KidQuest level engine.

Uses Pydantic Settings for environment variable management with .env file support.
Every variable is prefixed with KIDQUEST_ (e.g. KIDQUEST_DATABASE_PATH).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from src.core.platform_client import SyncConfig
    from src.game.scheduler import SM2Config
    from src.game.scoring import ScoringConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KIDQUEST_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    database_path: Path = Field(
        default=Path.home() / ".kidquest" / "state.db",
        description="SQLite file holding completions, progress and awards",
    )

    # ========================================
    # Player defaults
    # ========================================
    default_locale: Literal["en", "hi", "zh"] = Field(
        default="en",
        description="Content locale used when none is requested",
    )
    default_kid_id: str = Field(
        default="kid-1",
        description="Kid profile used by the CLI when --kid is not given",
    )

    # ========================================
    # Scoring
    # ========================================
    unlock_star_threshold: int = Field(
        default=3,
        ge=1,
        le=5,
        description="Stars on a level needed to unlock the next one",
    )
    time_bonus_enabled: bool = Field(
        default=True,
        description="Award bonus points for finishing under the time limit",
    )
    time_bonus_points_per_second: float = Field(
        default=0.1,
        ge=0,
        description="Bonus points per second saved",
    )

    # ========================================
    # Spaced repetition (SM-2)
    # ========================================
    sm2_initial_ease_factor: float = Field(
        default=2.5,
        description="Ease factor of a new or failed level",
    )
    sm2_minimum_ease_factor: float = Field(
        default=1.3,
        description="Lower bound of the ease factor",
    )

    # ========================================
    # Points sync
    # ========================================
    sync_enabled: bool = Field(
        default=False,
        description="Push awarded points to the points backend",
    )
    sync_base_url: str = Field(
        default="http://localhost:8000",
        description="Points backend base URL",
    )
    sync_api_key: str | None = Field(
        default=None,
        description="API key sent as X-API-Key",
    )
    sync_points_endpoint: str = Field(
        default="/api/points",
        description="Path of the award points endpoint",
    )
    sync_actor_id: str = Field(
        default="game-engine",
        description="Actor recorded with awarded points",
    )
    sync_timeout_seconds: float = Field(
        default=10.0,
        description="HTTP timeout for sync calls",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="Log level for the console sink",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional rotating log file",
    )

    # ========================================
    # Randomness
    # ========================================
    rng_seed: int | None = Field(
        default=None,
        description="Seed for question generation (None = nondeterministic)",
    )

    def get_scoring_config(self) -> ScoringConfig:
        from src.game.scoring import ScoringConfig

        return ScoringConfig(
            time_bonus_enabled=self.time_bonus_enabled,
            time_bonus_points_per_second=self.time_bonus_points_per_second,
            unlock_star_threshold=self.unlock_star_threshold,
        )

    def get_sm2_config(self) -> SM2Config:
        from src.game.scheduler import SM2Config

        return SM2Config(
            initial_ease_factor=self.sm2_initial_ease_factor,
            minimum_ease_factor=self.sm2_minimum_ease_factor,
        )

    def get_sync_config(self) -> SyncConfig:
        from src.core.platform_client import SyncConfig

        return SyncConfig(
            base_url=self.sync_base_url,
            api_key=self.sync_api_key,
            actor_id=self.sync_actor_id,
            timeout_seconds=self.sync_timeout_seconds,
            points_endpoint=self.sync_points_endpoint,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
