"""Configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    taskgraph_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    taskgraph_debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    taskgraph_log_dir: str | None = Field(
        default=None,
        description="Directory for rotated log files (stderr only if unset)",
    )

    # Breakdown storage
    taskgraph_storage_backend: Literal["memory", "file", "sql"] = Field(
        default="memory",
        description="Key-value backend used by the breakdown store",
    )
    taskgraph_storage_dir: str = Field(
        default="./breakdowns",
        description="Directory for the file backend",
    )
    taskgraph_database_url: str = Field(
        default="sqlite:///./taskgraph.db",
        description="SQLAlchemy database URL for the sql backend",
    )
    taskgraph_store_namespace: str = Field(
        default="task_breakdown",
        min_length=1,
        description="Key prefix for stored breakdowns",
    )

    @property
    def effective_log_level(self) -> str:
        """Get the log level, forced to DEBUG in debug mode."""
        return "DEBUG" if self.taskgraph_debug else self.taskgraph_log_level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> settings.taskgraph_storage_backend
        'memory'
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
