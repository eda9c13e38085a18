"""Configuration management for dnd-keeper.

Settings are loaded with pydantic-settings from environment variables and an
optional ``.env`` file, and can be overridden at construction time.

Example:
    >>> from dnd_keeper.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.storage.database_path
    PosixPath('data/keeper.db')

Environment Variables:
    DND_KEEPER_DATABASE_PATH: Path to the SQLite database file
    DND_KEEPER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DND_KEEPER_COMBAT_TURN_TRACKING: ``identity`` or ``positional``
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dnd_keeper.core.constants import DEFAULT_COMBAT_NAME
from dnd_keeper.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for the SQLite persistence layer.

    Attributes:
        database_path: Path to the SQLite database file.
        connect_timeout_seconds: How long a connection waits on a locked database.
        max_connect_attempts: Connection attempts before giving up.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_KEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/keeper.db"),
        description="Path to SQLite database",
    )
    connect_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=120,
        description="SQLite busy timeout",
    )
    max_connect_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Connection attempts before failing",
    )

    @model_validator(mode="after")
    def validate_database_path(self) -> "StorageSettings":
        """Reject a database path that points at an existing directory.

        Raises:
            ConfigurationError: If database_path is a directory.
        """
        if self.database_path.is_dir():
            raise ConfigurationError(
                f"database_path ({self.database_path}) is a directory",
                config_key="database_path",
            )
        return self


class CombatSettings(BaseSettings):
    """Configuration for new combat encounters.

    Attributes:
        default_combat_name: Name given to combats created without one.
        turn_tracking: How the current turn follows roster changes.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_KEEPER_COMBAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_combat_name: str = Field(
        default=DEFAULT_COMBAT_NAME,
        min_length=1,
        max_length=100,
        description="Default encounter name",
    )
    turn_tracking: Literal["identity", "positional"] = Field(
        default="identity",
        description="Track the current turn by participant or by index",
    )


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        storage: Persistence settings.
        combat: Combat defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_KEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="D&D Keeper",
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
        default="INFO",
        description="Logging level",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    combat: CombatSettings = Field(default_factory=CombatSettings)

    @property
    def is_production(self) -> bool:
        """True when not running in debug mode."""
        return not self.debug


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
    except ConfigurationError:
        raise
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
    "CombatSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
