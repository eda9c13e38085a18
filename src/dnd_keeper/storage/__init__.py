"""Storage module for dnd-keeper persistence.

Provides the KeeperRepository interface and its SQLite implementation for:
- Characters and their consumables
- Combats and their participants
- Scenarios (play sessions)
"""

from dnd_keeper.storage.base import KeeperRepository
from dnd_keeper.storage.database import Database, ScenarioRecord

__all__ = [
    "KeeperRepository",
    "Database",
    "ScenarioRecord",
]
