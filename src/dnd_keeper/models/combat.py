"""Combat encounters: initiative order and the turn state machine.

A Combat starts inactive with round 0, becomes active on ``start_combat``
(which needs at least one participant) and goes back to inactive on
``end_combat``. While active, ``next_turn`` walks the initiative order and
rolls over into a new round after the last participant.

Participants hold references to Characters owned elsewhere; removing a
participant never touches the character itself.

Turn tracking:
    ``identity`` (default) keeps the turn with the same participant when the
    roster changes mid-combat. ``positional`` leaves ``current_turn_index``
    alone on roster changes, so the turn may move to a different character
    or past the end of the order.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dnd_keeper.core.constants import NO_HP_DISPLAY
from dnd_keeper.core.ids import generate_id
from dnd_keeper.core.logging import get_logger
from dnd_keeper.models.character import Character
from dnd_keeper.models.enums import CharacterType, TurnTracking


logger = get_logger(__name__)


class Participant(BaseModel):
    """A character's seat in the initiative order.

    Attributes:
        character: The participating character (not owned by the combat).
        initiative: Initiative score, higher acts first.
        is_active: Whether the participant still takes turns.
        joined_round: Round in which the participant entered combat.
    """

    model_config = ConfigDict(extra="ignore")

    character: Character
    initiative: int
    is_active: bool = True
    joined_round: int = Field(default=1, ge=0)


class InitiativeOrderEntry(BaseModel):
    """Read-only display row of the initiative tracker."""

    model_config = ConfigDict(frozen=True)

    character_id: str
    name: str
    type: CharacterType
    initiative: int
    hp: str
    conditions: str
    consumables: str
    is_active: bool
    is_current: bool
    color: str


class Combat(BaseModel):
    """Turn-based combat encounter.

    Attributes:
        id: Unique combat identifier.
        name: Optional display name.
        participants: Participants sorted by initiative, highest first.
        current_round: Current round, 0 before the first start.
        current_turn_index: Index of the acting participant.
        is_active: Whether combat is running.
        turn_tracking: How the turn pointer follows roster changes.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=generate_id, description="Unique combat ID")
    name: str | None = Field(default=None, description="Encounter name")
    participants: list[Participant] = Field(default_factory=list)
    current_round: int = Field(default=0, ge=0, description="Current round")
    current_turn_index: int = Field(default=0, ge=0, description="Current turn index")
    is_active: bool = Field(default=False, description="Combat running")
    turn_tracking: TurnTracking = Field(default=TurnTracking.IDENTITY)

    # -------------------------------------------------------------------------
    # Roster
    # -------------------------------------------------------------------------

    def get_participant(self, character_id: str) -> Participant | None:
        for participant in self.participants:
            if participant.character.id == character_id:
                return participant
        return None

    def _current_participant(self) -> Participant | None:
        if not self.is_active or not 0 <= self.current_turn_index < len(self.participants):
            return None
        return self.participants[self.current_turn_index]

    def _tracks_identity(self) -> bool:
        return self.is_active and self.turn_tracking == TurnTracking.IDENTITY

    def sort_by_initiative(self) -> None:
        """Order participants by initiative, highest first, stable on ties."""
        self.participants.sort(key=lambda p: p.initiative, reverse=True)

    def add_character(self, character: Character, initiative: int) -> bool:
        """Add a character to the initiative order.

        Unlike a plain append, a character already taking part is refused,
        so a combat never seats the same character twice (storage keeps one
        participant row per character and combat).

        Args:
            character: Character joining the combat.
            initiative: Its initiative score.

        Returns:
            False if the character is already taking part.
        """
        if self.get_participant(character.id) is not None:
            return False

        current = self._current_participant()
        self.participants.append(
            Participant(
                character=character,
                initiative=initiative,
                joined_round=self.current_round if self.is_active else 1,
            )
        )
        self.sort_by_initiative()

        if current is not None and self._tracks_identity():
            self.current_turn_index = next(
                i for i, p in enumerate(self.participants) if p is current
            )

        logger.debug(
            "Character joined combat",
            combat_id=self.id,
            character=character.name,
            initiative=initiative,
        )
        return True

    def remove_character(self, character_id: str) -> bool:
        """Remove a character from the initiative order.

        Returns:
            True if the character was taking part.
        """
        index = next(
            (i for i, p in enumerate(self.participants) if p.character.id == character_id),
            None,
        )
        if index is None:
            return False

        removed = self.participants.pop(index)
        logger.debug("Character left combat", combat_id=self.id, character=removed.character.name)

        if not self._tracks_identity():
            return True
        if not self.participants:
            self.end_combat()
        elif index < self.current_turn_index:
            self.current_turn_index -= 1
        elif self.current_turn_index >= len(self.participants):
            # The last participant in the order held the turn
            self._next_round()
        return True

    # -------------------------------------------------------------------------
    # Turn state machine
    # -------------------------------------------------------------------------

    def start_combat(self) -> bool:
        """Begin round 1 with the highest initiative.

        Returns:
            False if there is nobody to fight.
        """
        if not self.participants:
            logger.warning("Cannot start combat without participants", combat_id=self.id)
            return False

        self.is_active = True
        self.current_round = 1
        self.current_turn_index = 0
        logger.info(
            "Combat started",
            combat_id=self.id,
            participants=len(self.participants),
        )
        return True

    def next_turn(self) -> Character | None:
        """Advance to the next participant, rolling over into a new round.

        Returns:
            The character whose turn it now is, or None if combat is inactive.
        """
        if not self.is_active:
            return None

        self.current_turn_index += 1
        if self.current_turn_index >= len(self.participants):
            self._next_round()

        return self.get_current_character()

    def _next_round(self) -> None:
        self.current_round += 1
        self.current_turn_index = 0
        logger.info("New round started", combat_id=self.id, round=self.current_round)

    def end_combat(self) -> None:
        self.is_active = False
        logger.info("Combat ended", combat_id=self.id, rounds=self.current_round)

    def get_current_character(self) -> Character | None:
        """The character whose turn it is, or None when inactive."""
        current = self._current_participant()
        return current.character if current is not None else None

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def get_initiative_order(self) -> list[InitiativeOrderEntry]:
        """Snapshot of the initiative tracker for display."""
        current = self._current_participant()
        return [
            InitiativeOrderEntry(
                character_id=p.character.id,
                name=p.character.name,
                type=p.character.type,
                initiative=p.initiative,
                hp=p.character.get_hp_display() or NO_HP_DISPLAY,
                conditions=", ".join(p.character.conditions),
                consumables=", ".join(p.character.get_consumables_display()),
                is_active=p.is_active and not p.character.is_down(),
                is_current=p is current,
                color=p.character.get_display_color(),
            )
            for p in self.participants
        ]


__all__ = [
    "Participant",
    "InitiativeOrderEntry",
    "Combat",
]
