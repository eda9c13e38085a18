"""Core module providing configuration, logging, ids and base exceptions.

Exports:
    Exceptions:
        DndKeeperError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        StorageError: Persistence failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_logging_from_settings: Set up logging from Settings.
        combat_context: Bind a combat id to log entries inside a block.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.

    Identity:
        generate_id: New opaque entity id.
"""

from __future__ import annotations

from dnd_keeper.core.config import (
    CombatSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from dnd_keeper.core.exceptions import (
    CombatError,
    ConfigurationError,
    DndKeeperError,
    GameEngineError,
    StorageError,
)
from dnd_keeper.core.ids import generate_id
from dnd_keeper.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    combat_context,
    configure_logging_from_settings,
    get_logger,
)


__all__ = [
    # Exceptions
    "DndKeeperError",
    "GameEngineError",
    "CombatError",
    "StorageError",
    "ConfigurationError",
    # Configuration
    "Settings",
    "StorageSettings",
    "CombatSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_logging_from_settings",
    "combat_context",
    "get_logger",
    "bind_context",
    "clear_context",
    # Identity
    "generate_id",
]
