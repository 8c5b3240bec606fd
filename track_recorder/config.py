"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict

# Project root: track-recorder/
PROJECT_ROOT = Path(__file__).parent.parent
# Default data directory: track-recorder/data/
DATA_DIR = PROJECT_ROOT / "data"


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Storage ===
    storage_dir: Path = Field(
        default=DATA_DIR / "storage",
        description="Directory backing the durable key-value slot"
    )
    track_storage_key: str = Field(
        default="gpsTrack",
        description="Key under which the recorded track is persisted"
    )

    # === Export ===
    export_dir: Path = Field(
        default=DATA_DIR / "exports",
        description="Directory where exported GPX files are written"
    )
    gpx_creator: str = Field(default="MyGPSApp")
    gpx_track_name: str = Field(default="GPS Track")

    # === Location source ===
    location_enabled: bool = Field(
        default=True,
        description="External permission gate checked before recording starts"
    )
    watch_high_accuracy: bool = Field(default=True)
    watch_timeout_ms: int = Field(default=10000, ge=0)
    watch_maximum_age_ms: int = Field(default=0, ge=0)
    replay_interval_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Delay between points when replaying a GPX file"
    )

    # === Telegram ===
    telegram_bot_token: Optional[str] = Field(
        default=None,
        description="Telegram Bot token for recording notifications"
    )
    telegram_chat_id: Optional[int] = Field(default=None)

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept 'debug', 'Info' etc."""
        return v.upper()

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
