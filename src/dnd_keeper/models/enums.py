"""Enumeration types for dnd-keeper.

All enums are StrEnums so that they compare equal to the plain strings
stored in the database and passed in by callers (``"long_rest"``,
``"pc"``, ...).
"""

from __future__ import annotations

from enum import StrEnum


class CharacterType(StrEnum):
    """Kinds of actors in the initiative order."""

    PC = "pc"
    ENEMY = "enemy"
    LAIR = "lair"


class ResetCondition(StrEnum):
    """Event that refills a consumable."""

    LONG_REST = "long_rest"
    SHORT_REST = "short_rest"
    DAWN = "dawn"
    DUSK = "dusk"
    NEVER = "never"

    @property
    def reset_type(self) -> ResetType:
        """Category of the trigger (rest, time of day, or never)."""
        if self in (ResetCondition.LONG_REST, ResetCondition.SHORT_REST):
            return ResetType.REST
        if self in (ResetCondition.DAWN, ResetCondition.DUSK):
            return ResetType.TIME
        return ResetType.NEVER


class ResetType(StrEnum):
    """Trigger category derived from a ResetCondition."""

    REST = "rest"
    TIME = "time"
    NEVER = "never"


class RecoveryType(StrEnum):
    """How many charges a consumable regains when it resets.

    A bare integer is also accepted wherever a RecoveryType is, meaning
    "regain exactly that many charges".
    """

    FULL = "full"
    DICE = "dice"
    FIXED = "fixed"


class TurnTracking(StrEnum):
    """How a combat keeps its turn pointer across roster changes."""

    IDENTITY = "identity"
    POSITIONAL = "positional"


def reset_type_for(condition: str) -> ResetType:
    """Map any reset-condition string to its ResetType.

    Unknown strings map to ``ResetType.NEVER``.
    """
    try:
        return ResetCondition(condition).reset_type
    except ValueError:
        return ResetType.NEVER


__all__ = [
    "CharacterType",
    "ResetCondition",
    "ResetType",
    "RecoveryType",
    "TurnTracking",
    "reset_type_for",
]
