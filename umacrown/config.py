"""Application configuration using Pydantic settings."""

from datetime import datetime
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

JST = ZoneInfo("Asia/Tokyo")


def jst_now() -> datetime:
    """Current time in Tokyo (the game's server calendar)."""
    return datetime.now(JST)


def jst_now_naive() -> datetime:
    """Current Tokyo time as naive datetime (for SQLAlchemy defaults).

    SQLite doesn't handle timezone-aware datetimes well, so we store
    Tokyo local time as naive datetime.
    """
    return jst_now().replace(tzinfo=None)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="UMACROWN_",
        extra="ignore",
    )

    # Database
    db_path: Path = Path("./data/umacrown.db")

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Rotation planner tunables
    max_consecutive_races: int = 3  # longest allowed run of back-to-back slots
    enhancement_budget: int = 6  # inherited factor slots available per run
    natural_strategy_cap: int = 3  # max factors per category for a final's strategy
    factor_slots: int = 6
    place_completed_mandatory: bool = False

    @property
    def database_url(self) -> str:
        """SQLite database URL for SQLAlchemy."""
        return f"sqlite+aiosqlite:///{self.db_path}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export for convenience
settings = get_settings()
