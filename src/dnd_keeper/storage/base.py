"""Persistence interface consumed by the orchestration layer.

The entities in ``dnd_keeper.models`` know nothing about storage. Whatever
loads and saves them implements KeeperRepository and is handed to the
EncounterService explicitly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from dnd_keeper.models.character import Character
    from dnd_keeper.models.combat import Combat


class KeeperRepository(ABC):
    """Abstract load/save operations for characters and combats."""

    @abstractmethod
    def save_character(self, character: Character) -> Character:
        """Upsert a character and replace its consumables."""
        ...

    @abstractmethod
    def load_character(self, character_id: str) -> Character | None:
        """Load a character with its consumables."""
        ...

    @abstractmethod
    def load_all_characters(self) -> list[Character]:
        """Load every character, ordered by name."""
        ...

    @abstractmethod
    def delete_character(self, character_id: str) -> bool:
        """Delete a character and everything it owns."""
        ...

    @abstractmethod
    def save_combat(self, combat: Combat) -> Combat:
        """Upsert a combat and replace its participants."""
        ...

    @abstractmethod
    def load_combat(self, combat_id: str) -> Combat | None:
        """Load a combat with its participants in initiative order."""
        ...

    @abstractmethod
    def trigger_rest(self, rest_type: str) -> int:
        """Recover every stored consumable that resets on this rest."""
        ...

    @abstractmethod
    def trigger_time_recovery(self, time_condition: str) -> int:
        """Recover every stored consumable that resets at this time of day."""
        ...


__all__ = ["KeeperRepository"]
