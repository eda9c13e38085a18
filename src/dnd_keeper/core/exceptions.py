"""Exception hierarchy for dnd-keeper.

Entity operations (damage, healing, charge use, turn advancement) are total
and report failure through return values. Exceptions are reserved for the
configuration layer and the persistence boundary. All of them inherit from
DndKeeperError so callers can handle everything at one place.

Example:
    >>> from dnd_keeper.core.exceptions import StorageError
    >>> raise StorageError("Failed to save character", operation="save_character")
"""

from __future__ import annotations

from typing import Any


class DndKeeperError(Exception):
    """Base exception for all dnd-keeper errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Game Engine Exceptions
# =============================================================================


class GameEngineError(DndKeeperError):
    """Base exception for game engine errors raised outside the entities."""


class CombatError(GameEngineError):
    """Raised when a combat cannot be resolved by the orchestration layer."""

    def __init__(
        self,
        message: str,
        *,
        combat_id: str | None = None,
        round_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with combat context.

        Args:
            message: Human-readable error description.
            combat_id: Identifier of the combat involved.
            round_number: Current combat round when the error occurred.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if combat_id:
            combined_details["combat_id"] = combat_id
        if round_number is not None:
            combined_details["round_number"] = round_number
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageError(DndKeeperError):
    """Raised when the persistence layer fails.

    Wraps sqlite3 errors (I/O, locking, constraint violations) so that
    callers never need to import the driver to handle them.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error with operation context.

        Args:
            message: Human-readable error description.
            operation: Name of the repository operation that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if operation:
            combined_details["operation"] = operation
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(DndKeeperError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


__all__ = [
    "DndKeeperError",
    "GameEngineError",
    "CombatError",
    "StorageError",
    "ConfigurationError",
]
