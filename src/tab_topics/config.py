"""
Configuration management for the clustering engine.
"""

import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine defaults loaded from environment variables (TAB_TOPICS_*)."""

    # Clustering
    similarity_threshold: float = Field(default=0.2, gt=0.0, le=1.0)
    min_cluster_size: int = Field(default=2, ge=1)
    extra_stop_words: list[str] = Field(default_factory=list)

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TAB_TOPICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global settings
    settings = None


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
            Defaults to the configured ``log_level`` setting.
    """
    level = log_level or get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
