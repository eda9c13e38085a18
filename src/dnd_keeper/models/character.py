"""Characters: player characters, enemies and lair-action pseudo-actors.

A Character owns its vitals, condition labels and consumables. All
mutations are confined to the character and the consumables it owns.
Lair actors have no hit points or armor class, so damage and healing are
ignored for them and they are never down.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dnd_keeper.core.constants import DEFAULT_AC, DISPLAY_COLORS, UNKNOWN_DISPLAY_COLOR
from dnd_keeper.core.ids import generate_id
from dnd_keeper.models.consumable import Consumable
from dnd_keeper.models.enums import CharacterType, ResetType
from dnd_keeper.models.pools import HitPoints


class Character(BaseModel):
    """An actor that can take part in combat.

    Attributes:
        id: Unique character identifier.
        name: Display name.
        type: pc, enemy or lair.
        ac: Armor class, None for lair actors.
        hp: Hit points, None for lair actors.
        conditions: Active condition labels, without duplicates.
        consumables: Owned consumables in insertion order.
        notes: Free-form DM notes.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=generate_id, description="Unique character ID")
    name: str = Field(min_length=1, description="Display name")
    type: CharacterType = Field(default=CharacterType.PC, description="Actor kind")
    ac: int | None = Field(default=DEFAULT_AC, description="Armor class")
    hp: HitPoints | None = Field(default_factory=HitPoints, description="Hit points")
    conditions: list[str] = Field(default_factory=list, description="Condition labels")
    consumables: list[Consumable] = Field(default_factory=list, description="Owned consumables")
    notes: str = Field(default="", description="DM notes")

    @field_validator("conditions", mode="before")
    @classmethod
    def dedupe_conditions(cls, v: Any) -> Any:
        """Drop repeated labels, keeping the first occurrence."""
        if isinstance(v, (list, tuple, set)):
            return list(dict.fromkeys(v))
        return v

    @model_validator(mode="after")
    def strip_lair_vitals(self) -> Character:
        """Lair actors carry neither HP nor AC."""
        if self.type == CharacterType.LAIR:
            self.hp = None
            self.ac = None
        return self

    # -------------------------------------------------------------------------
    # Vitals
    # -------------------------------------------------------------------------

    @property
    def has_vitals(self) -> bool:
        """Whether damage and healing apply to this character."""
        return self.type != CharacterType.LAIR and self.hp is not None

    def take_damage(self, amount: int) -> int:
        """Reduce HP, never below 0.

        Returns:
            HP actually lost.
        """
        if not self.has_vitals:
            return 0
        return -self.hp.adjust(-amount)

    def heal(self, amount: int) -> int:
        """Restore HP, never above max.

        Returns:
            HP actually restored.
        """
        if not self.has_vitals:
            return 0
        return self.hp.adjust(amount)

    def is_down(self) -> bool:
        """Whether the character is at 0 HP. Lair actors are never down."""
        if not self.has_vitals:
            return False
        return self.hp.current <= 0

    # -------------------------------------------------------------------------
    # Conditions
    # -------------------------------------------------------------------------

    def add_condition(self, condition: str) -> None:
        if condition not in self.conditions:
            self.conditions.append(condition)

    def remove_condition(self, condition: str) -> None:
        self.conditions = [c for c in self.conditions if c != condition]

    # -------------------------------------------------------------------------
    # Consumables
    # -------------------------------------------------------------------------

    def add_consumable(self, consumable: Consumable) -> None:
        self.consumables.append(consumable)

    def remove_consumable(self, consumable_id: str) -> bool:
        """Remove a consumable by id.

        Returns:
            True if something was removed.
        """
        before = len(self.consumables)
        self.consumables = [c for c in self.consumables if c.id != consumable_id]
        return len(self.consumables) != before

    def get_consumable(self, identifier: str) -> Consumable | None:
        """Find a consumable by id, falling back to an exact name match."""
        for consumable in self.consumables:
            if consumable.id == identifier:
                return consumable
        for consumable in self.consumables:
            if consumable.name == identifier:
                return consumable
        return None

    def use_consumable(self, identifier: str, amount: int = 1) -> bool:
        """Spend charges of a consumable found by id or name.

        Returns:
            False if the consumable is missing or lacks charges.
        """
        consumable = self.get_consumable(identifier)
        if consumable is None:
            return False
        return consumable.use(amount)

    def _recover_matching(self, reset_type: ResetType, condition: str) -> list[Consumable]:
        recovered = []
        for consumable in self.consumables:
            if consumable.reset_type == reset_type and consumable.reset_condition == condition:
                consumable.recover()
                recovered.append(consumable)
        return recovered

    def rest(self, rest_type: str) -> list[Consumable]:
        """Recover consumables that reset on this kind of rest.

        Args:
            rest_type: ``long_rest`` or ``short_rest``.

        Returns:
            The consumables that were recovered.
        """
        return self._recover_matching(ResetType.REST, rest_type)

    def time_recovery(self, time_condition: str) -> list[Consumable]:
        """Recover consumables that reset at this time of day (``dawn``/``dusk``)."""
        return self._recover_matching(ResetType.TIME, time_condition)

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def get_consumables_display(self) -> list[str]:
        return [c.get_display_string() for c in self.consumables]

    def get_hp_display(self) -> str | None:
        """HP as ``"current/max"``, or None without hit points."""
        return str(self.hp) if self.hp is not None else None

    def get_display_color(self) -> str:
        """Initiative tracker color for this character's type."""
        return DISPLAY_COLORS.get(str(self.type), UNKNOWN_DISPLAY_COLOR)


__all__ = ["Character"]
