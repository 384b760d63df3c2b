"""Configuration management for the Guildhall character manager.

Settings are loaded with pydantic-settings from environment variables and
an optional ``.env`` file.

Example:
    >>> from guildhall.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.storage.database_path)
    data/guildhall.db

Environment Variables:
    GUILDHALL_DATABASE_PATH: Path to the SQLite database file
    GUILDHALL_TIMEOUT_SECONDS: SQLite busy timeout
    GUILDHALL_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    GUILDHALL_JSON_LOGS: Emit JSON log lines instead of console output
    GUILDHALL_GAME_COMBAT_MAX_ROUNDS: Round limit for simulated combat
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from guildhall.core.constants import IN_MEMORY_DATABASE
from guildhall.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for the relational store.

    Attributes:
        database_path: Path to the SQLite database file (or ``:memory:``).
        timeout_seconds: How long a statement waits on a locked database.
    """

    model_config = SettingsConfigDict(
        env_prefix="GUILDHALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/guildhall.db"),
        description="Path to SQLite database",
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=120,
        description="SQLite busy timeout in seconds",
    )

    @field_validator("database_path", mode="after")
    @classmethod
    def ensure_parent_exists(cls, value: Path) -> Path:
        """Create the database directory if necessary.

        Args:
            value: The configured database path.

        Returns:
            The validated path.
        """
        if str(value) != IN_MEMORY_DATABASE:
            value.parent.mkdir(parents=True, exist_ok=True)
        return value


class GameSettings(BaseSettings):
    """Configuration for game rules that are not fixed constants.

    Attributes:
        combat_max_rounds: Rounds after which a simulated fight is a draw.
        default_sort: Ordering used when listing characters.
    """

    model_config = SettingsConfigDict(
        env_prefix="GUILDHALL_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    combat_max_rounds: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Maximum rounds in a simulated combat",
    )
    default_sort: Literal["id", "name", "level", "power"] = Field(
        default="id",
        description="Default ordering for character listings",
    )


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Render logs as JSON.
        log_file: Optional file that receives a copy of the logs.
        storage: Storage settings.
        game: Game rule settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="GUILDHALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Guildhall",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    game: GameSettings = Field(default_factory=GameSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
