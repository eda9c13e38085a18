"""Pydantic V2 models for dnd-keeper.

Submodules:
    enums: CharacterType, ResetCondition, ResetType, RecoveryType, TurnTracking
    pools: Normalizing current/max pools (Charges, HitPoints)
    consumable: Consumable charge pools with reset policies
    character: Characters with vitals, conditions and consumables
    combat: Initiative order and turn state machine

Example:
    >>> from dnd_keeper.models import Character, Combat, Consumable
    >>> fighter = Character(name="Aragorn", hp=58, ac=18)
    >>> fighter.add_consumable(Consumable(name="Second Wind", reset_condition="short_rest"))
    >>> combat = Combat(name="Orc Ambush")
    >>> combat.add_character(fighter, 17)
    True
"""

from __future__ import annotations

from dnd_keeper.models.character import Character
from dnd_keeper.models.combat import Combat, InitiativeOrderEntry, Participant
from dnd_keeper.models.consumable import Consumable
from dnd_keeper.models.enums import (
    CharacterType,
    RecoveryType,
    ResetCondition,
    ResetType,
    TurnTracking,
    reset_type_for,
)
from dnd_keeper.models.pools import Charges, HitPoints, Pool


__all__ = [
    # Enumerations
    "CharacterType",
    "ResetCondition",
    "ResetType",
    "RecoveryType",
    "TurnTracking",
    "reset_type_for",
    # Pools
    "Pool",
    "Charges",
    "HitPoints",
    # Entities
    "Consumable",
    "Character",
    "Participant",
    "InitiativeOrderEntry",
    "Combat",
]
