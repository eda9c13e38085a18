"""dnd-keeper - tabletop RPG combat assistant.

Tracks characters (player characters, enemies, lair actions), their hit
points, armor class, conditions and consumable resources, and runs a
turn-based initiative tracker. State is persisted to SQLite so sessions
can be resumed.

Example:
    >>> from dnd_keeper import Character, Combat
    >>>
    >>> aragorn = Character(name="Aragorn", hp=58, ac=18)
    >>> orc = Character(name="Orc Chieftain", type="enemy", hp=85, ac=15)
    >>>
    >>> combat = Combat()
    >>> combat.add_character(aragorn, 17)
    True
    >>> combat.add_character(orc, 12)
    True
    >>> combat.start_combat()
    True
    >>> combat.get_current_character().name
    'Aragorn'

Modules:
    core: Configuration, logging, ids and base exceptions.
    models: Consumable, Character and Combat entities.
    engine: Recovery dispatch and the EncounterService.
    storage: Repository interface and SQLite implementation.
"""

from __future__ import annotations

# Core
from dnd_keeper.core.config import Settings, get_settings
from dnd_keeper.core.exceptions import DndKeeperError
from dnd_keeper.core.ids import generate_id
from dnd_keeper.core.logging import configure_logging, get_logger

# Models
from dnd_keeper.models import (
    Character,
    CharacterType,
    Combat,
    Consumable,
    InitiativeOrderEntry,
    Participant,
    RecoveryType,
    ResetCondition,
    ResetType,
    TurnTracking,
)

# Engine
from dnd_keeper.engine import EncounterService, trigger_rest, trigger_time_recovery

# Storage
from dnd_keeper.storage import Database, KeeperRepository, ScenarioRecord


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "DndKeeperError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "generate_id",
    # Models
    "Character",
    "CharacterType",
    "Combat",
    "Consumable",
    "InitiativeOrderEntry",
    "Participant",
    "RecoveryType",
    "ResetCondition",
    "ResetType",
    "TurnTracking",
    # Engine
    "EncounterService",
    "trigger_rest",
    "trigger_time_recovery",
    # Storage
    "Database",
    "KeeperRepository",
    "ScenarioRecord",
]
