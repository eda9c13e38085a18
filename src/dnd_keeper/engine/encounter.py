"""Load, mutate and save combats and characters through a repository.

EncounterService is the only piece that talks to persistence. Each call
loads the entities it needs, applies one in-memory operation and saves the
result, so storage never sees a half-applied change.

Example:
    >>> service = EncounterService(Database("data/keeper.db"))
    >>> combat = service.new_combat("Goblin Ambush")
    >>> service.start_combat(combat.id)
    False
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dnd_keeper.core.config import Settings, get_settings
from dnd_keeper.core.exceptions import CombatError
from dnd_keeper.core.logging import combat_context, get_logger
from dnd_keeper.engine.recovery import trigger_rest, trigger_time_recovery
from dnd_keeper.models.combat import Combat, InitiativeOrderEntry


if TYPE_CHECKING:
    from collections.abc import Iterable

    from dnd_keeper.models.character import Character
    from dnd_keeper.storage.base import KeeperRepository

logger = get_logger(__name__)


class EncounterService:
    """Combat and recovery operations backed by an injected repository."""

    def __init__(self, repository: KeeperRepository, settings: Settings | None = None) -> None:
        """Initialize the service.

        Args:
            repository: Where characters and combats are stored.
            settings: Application settings; the cached settings if None.
        """
        self.repository = repository
        self.settings = settings or get_settings()

    # -------------------------------------------------------------------------
    # Combat
    # -------------------------------------------------------------------------

    def new_combat(self, name: str | None = None) -> Combat:
        """Create and store an empty, inactive combat."""
        combat = Combat(
            name=name or self.settings.combat.default_combat_name,
            turn_tracking=self.settings.combat.turn_tracking,
        )
        return self.repository.save_combat(combat)

    def get_combat(self, combat_id: str) -> Combat:
        """Load a combat that must exist.

        Raises:
            CombatError: If no combat has this id.
        """
        combat = self.repository.load_combat(combat_id)
        if combat is None:
            raise CombatError("Combat not found", combat_id=combat_id)
        return combat

    def join_combat(self, combat_id: str, character: Character, initiative: int) -> bool:
        """Add a character to a stored combat.

        Returns:
            False if the combat is missing or the character already takes part.
        """
        combat = self.repository.load_combat(combat_id)
        if combat is None or not combat.add_character(character, initiative):
            return False
        self.repository.save_combat(combat)
        return True

    def leave_combat(self, combat_id: str, character_id: str) -> bool:
        combat = self.repository.load_combat(combat_id)
        if combat is None or not combat.remove_character(character_id):
            return False
        self.repository.save_combat(combat)
        return True

    def start_combat(self, combat_id: str) -> bool:
        """Start a stored combat.

        Returns:
            False if the combat is missing or has no participants.
        """
        combat = self.repository.load_combat(combat_id)
        if combat is None:
            logger.warning("Cannot start unknown combat", combat_id=combat_id)
            return False
        with combat_context(combat.id):
            if not combat.start_combat():
                return False
            self.repository.save_combat(combat)
        return True

    def advance_turn(self, combat_id: str) -> Character | None:
        """Advance a stored combat by one turn.

        Returns:
            The character whose turn it now is, or None if the combat is
            missing or inactive.
        """
        combat = self.repository.load_combat(combat_id)
        if combat is None or not combat.is_active:
            return None
        with combat_context(combat.id, round_number=combat.current_round):
            current = combat.next_turn()
            self.repository.save_combat(combat)
            logger.debug("Turn advanced", character=current.name if current else None)
        return current

    def end_combat(self, combat_id: str) -> bool:
        combat = self.repository.load_combat(combat_id)
        if combat is None:
            return False
        with combat_context(combat.id, round_number=combat.current_round):
            combat.end_combat()
            self.repository.save_combat(combat)
        return True

    def initiative_order(self, combat_id: str) -> list[InitiativeOrderEntry]:
        """Display snapshot of a stored combat.

        Raises:
            CombatError: If no combat has this id.
        """
        return self.get_combat(combat_id).get_initiative_order()

    # -------------------------------------------------------------------------
    # Vitals
    # -------------------------------------------------------------------------

    def apply_damage(self, character_id: str, amount: int) -> Character | None:
        """Damage a stored character. Returns None if it does not exist."""
        character = self.repository.load_character(character_id)
        if character is None:
            return None
        character.take_damage(amount)
        return self.repository.save_character(character)

    def apply_healing(self, character_id: str, amount: int) -> Character | None:
        """Heal a stored character. Returns None if it does not exist."""
        character = self.repository.load_character(character_id)
        if character is None:
            return None
        character.heal(amount)
        return self.repository.save_character(character)

    # -------------------------------------------------------------------------
    # Recovery
    # -------------------------------------------------------------------------

    def rest(self, rest_type: str, characters: Iterable[Character] | None = None) -> int:
        """Apply a rest to storage and to the given in-memory characters.

        Stored consumables are recovered in bulk first. Characters passed in
        are then recovered in memory and saved, which leaves their rows
        equal to their in-memory state.

        Returns:
            Consumables recovered in memory, or rows updated in storage when
            no characters are given.
        """
        updated = self.repository.trigger_rest(rest_type)
        if characters is None:
            return updated

        in_scope = list(characters)
        recovered = trigger_rest(in_scope, rest_type)
        for character in in_scope:
            self.repository.save_character(character)
        return recovered

    def time_recovery(
        self,
        time_condition: str,
        characters: Iterable[Character] | None = None,
    ) -> int:
        """Time-of-day counterpart of ``rest``."""
        updated = self.repository.trigger_time_recovery(time_condition)
        if characters is None:
            return updated

        in_scope = list(characters)
        recovered = trigger_time_recovery(in_scope, time_condition)
        for character in in_scope:
            self.repository.save_character(character)
        return recovered


__all__ = ["EncounterService"]
