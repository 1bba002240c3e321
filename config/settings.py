"""Application settings and configuration."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Highest single-stat cost in the point-based cost table (stat value 18)
MAX_STAT_COST = 12


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="Roguelike Birth")
    debug: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="WARNING")
    log_file: Optional[str] = Field(default=None)

    # Birth
    point_pool: int = Field(default=20)
    random_seed: Optional[int] = Field(default=None)
    catalog_path: Optional[Path] = Field(default=None)
    allow_quick_start: bool = Field(default=True)

    class Config:
        """Pydantic configuration."""
        env_prefix = "BIRTH_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @field_validator("point_pool")
    @classmethod
    def validate_point_pool(cls, value: int) -> int:
        """Reject negative pools; warn when the pool can buy every stat at 18."""
        if value < 0:
            raise ValueError(f"point_pool must be non-negative, got {value}")
        if value > 6 * MAX_STAT_COST:
            logger.warning(f"point_pool {value} exceeds the cost of six maximal stats")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize the log level name."""
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level


# Global settings instance
settings = Settings()
