"""SQLite persistence layer for dnd-keeper.

Stores characters with their consumables, combats with their participants,
and play scenarios. Each public method runs in its own connection and
transaction, so a character and its consumables (or a combat and its
participants) are always written together.

Default location: ``data/keeper.db`` (see StorageSettings.database_path).
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from dnd_keeper.core.config import StorageSettings, get_settings
from dnd_keeper.core.constants import DATABASE_VERSION, DEFAULT_COMBAT_NAME
from dnd_keeper.core.exceptions import StorageError
from dnd_keeper.core.logging import get_logger
from dnd_keeper.models.character import Character
from dnd_keeper.models.combat import Combat, Participant
from dnd_keeper.models.consumable import Consumable
from dnd_keeper.models.enums import ResetType, reset_type_for
from dnd_keeper.storage.base import KeeperRepository


if TYPE_CHECKING:
    from collections.abc import Generator

logger = get_logger(__name__)


# Applies Consumable.recover() arithmetic to every matching row
_RECOVER_SQL = """
    UPDATE consumables
    SET current_charges = MAX(0, MIN(max_charges, current_charges +
        CASE recovery_type
            WHEN 'full' THEN max_charges
            WHEN 'dice' THEN (max_charges + 1) / 2
            WHEN 'fixed' THEN COALESCE(recovery_amount, 0)
            ELSE CAST(recovery_type AS INTEGER)
        END))
    WHERE reset_condition = ? AND character_id IS NOT NULL
"""


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ScenarioRecord:
    """A stored play session.

    Attributes:
        name: Scenario name.
        is_active: Whether this is the scenario currently being played.
        start_time: Epoch seconds when play started, if it has.
        elapsed_time: In-game seconds elapsed.
        id: Row id, assigned on first save.
    """

    name: str
    is_active: bool = False
    start_time: int | None = None
    elapsed_time: int = 0
    id: int | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> ScenarioRecord:
        """Create from database row."""
        return cls(
            id=row["id"],
            name=row["name"],
            is_active=bool(row["is_active"]),
            start_time=row["start_time"],
            elapsed_time=row["elapsed_time"] or 0,
        )


# =============================================================================
# Database Class
# =============================================================================


class Database(KeeperRepository):
    """SQLite implementation of KeeperRepository.

    Manages storage of:
    - Characters and the consumables they own
    - Combats and their participants
    - Scenarios (at most one active)
    """

    SCHEMA_VERSION = DATABASE_VERSION

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        timeout_seconds: float = 5.0,
        max_connect_attempts: int = 3,
    ) -> None:
        """Initialize database and create the schema if needed.

        Args:
            db_path: Path to database file. If None, uses the configured path.
            timeout_seconds: How long to wait on a locked database.
            max_connect_attempts: Connection attempts before failing.
        """
        if db_path is None:
            self.db_path = get_settings().storage.database_path
        else:
            self.db_path = Path(db_path)
        self.timeout_seconds = timeout_seconds
        self.max_connect_attempts = max_connect_attempts

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("Database initialized", path=str(self.db_path))

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> Database:
        """Create a database from storage settings."""
        return cls(
            settings.database_path,
            timeout_seconds=settings.connect_timeout_seconds,
            max_connect_attempts=settings.max_connect_attempts,
        )

    def _open_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=self.timeout_seconds)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _connect(self) -> sqlite3.Connection:
        """Open a connection, retrying while the file is locked or unavailable."""
        retryer = Retrying(
            retry=retry_if_exception_type(sqlite3.OperationalError),
            stop=stop_after_attempt(self.max_connect_attempts),
            wait=wait_exponential(multiplier=0.1, max=2),
            reraise=True,
        )
        return retryer(self._open_connection)

    @contextmanager
    def _get_connection(self, operation: str) -> Generator[sqlite3.Connection, None, None]:
        """Yield a connection that commits on success and rolls back on error.

        Raises:
            StorageError: If the connection or any statement fails.
        """
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise StorageError(
                f"Could not open database: {exc}",
                operation=operation,
                details={"path": str(self.db_path)},
            ) from exc

        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error("Database operation failed", operation=operation, error=str(exc))
            raise StorageError(f"Database operation failed: {exc}", operation=operation) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Create tables and stamp the schema version."""
        with self._get_connection("init_schema") as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS scenarios (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    is_active BOOLEAN NOT NULL DEFAULT 0,
                    start_time INTEGER,
                    elapsed_time INTEGER DEFAULT 0,
                    created_at INTEGER DEFAULT (strftime('%s', 'now'))
                )
            """)
            cursor.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS idx_scenarios_active
                ON scenarios(is_active) WHERE is_active = 1
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS characters (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    type TEXT NOT NULL CHECK (type IN ('pc', 'enemy', 'lair')),
                    ac INTEGER,
                    hp_current INTEGER,
                    hp_max INTEGER,
                    conditions TEXT DEFAULT '[]',
                    notes TEXT DEFAULT '',
                    created_at INTEGER DEFAULT (strftime('%s', 'now'))
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS consumables (
                    id TEXT PRIMARY KEY,
                    character_id TEXT,
                    position INTEGER NOT NULL DEFAULT 0,
                    name TEXT NOT NULL,
                    current_charges INTEGER NOT NULL,
                    max_charges INTEGER NOT NULL,
                    reset_condition TEXT NOT NULL CHECK (
                        reset_condition IN ('long_rest', 'short_rest', 'dawn', 'dusk', 'never')
                    ),
                    recovery_type TEXT NOT NULL DEFAULT 'full',
                    recovery_amount INTEGER,
                    description TEXT DEFAULT '',
                    notes TEXT DEFAULT '',
                    created_at INTEGER DEFAULT (strftime('%s', 'now')),
                    FOREIGN KEY (character_id) REFERENCES characters(id) ON DELETE CASCADE
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS combats (
                    id TEXT PRIMARY KEY,
                    name TEXT DEFAULT 'Combat Encounter',
                    current_round INTEGER DEFAULT 0,
                    current_turn_index INTEGER DEFAULT 0,
                    is_active BOOLEAN NOT NULL DEFAULT 0,
                    turn_tracking TEXT NOT NULL DEFAULT 'identity',
                    created_at INTEGER DEFAULT (strftime('%s', 'now'))
                )
            """)
            cursor.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS idx_combats_active
                ON combats(is_active) WHERE is_active = 1
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS combat_participants (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    combat_id TEXT NOT NULL,
                    character_id TEXT NOT NULL,
                    position INTEGER NOT NULL DEFAULT 0,
                    initiative INTEGER NOT NULL,
                    is_active BOOLEAN NOT NULL DEFAULT 1,
                    joined_round INTEGER DEFAULT 1,
                    created_at INTEGER DEFAULT (strftime('%s', 'now')),
                    FOREIGN KEY (combat_id) REFERENCES combats(id) ON DELETE CASCADE,
                    FOREIGN KEY (character_id) REFERENCES characters(id) ON DELETE CASCADE,
                    UNIQUE(combat_id, character_id)
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS db_metadata (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at INTEGER DEFAULT (strftime('%s', 'now'))
                )
            """)
            cursor.execute(
                "INSERT OR REPLACE INTO db_metadata (key, value) VALUES ('version', ?)",
                (str(self.SCHEMA_VERSION),),
            )

    def get_schema_version(self) -> int:
        """Version stamped into db_metadata."""
        with self._get_connection("get_schema_version") as conn:
            row = conn.execute("SELECT value FROM db_metadata WHERE key = 'version'").fetchone()
            return int(row["value"])

    # =========================================================================
    # Character Operations
    # =========================================================================

    def _write_character(self, conn: sqlite3.Connection, character: Character) -> None:
        hp = character.hp
        conn.execute("""
            INSERT INTO characters (id, name, type, ac, hp_current, hp_max, conditions, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                type = excluded.type,
                ac = excluded.ac,
                hp_current = excluded.hp_current,
                hp_max = excluded.hp_max,
                conditions = excluded.conditions,
                notes = excluded.notes
        """, (
            character.id,
            character.name,
            str(character.type),
            character.ac,
            hp.current if hp is not None else None,
            hp.max if hp is not None else None,
            json.dumps(character.conditions),
            character.notes,
        ))

        # Replace the consumable set wholesale
        conn.execute("DELETE FROM consumables WHERE character_id = ?", (character.id,))
        for position, consumable in enumerate(character.consumables):
            conn.execute("""
                INSERT OR REPLACE INTO consumables
                (id, character_id, position, name, current_charges, max_charges,
                 reset_condition, recovery_type, recovery_amount, description, notes)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                consumable.id,
                character.id,
                position,
                consumable.name,
                consumable.charges.current,
                consumable.charges.max,
                str(consumable.reset_condition),
                str(consumable.recovery_type),
                consumable.recovery_amount,
                consumable.description,
                consumable.notes,
            ))

    def _read_character(self, conn: sqlite3.Connection, character_id: str) -> Character | None:
        row = conn.execute("SELECT * FROM characters WHERE id = ?", (character_id,)).fetchone()
        if row is None:
            return None

        consumable_rows = conn.execute("""
            SELECT * FROM consumables WHERE character_id = ?
            ORDER BY position, rowid
        """, (character_id,)).fetchall()

        return Character(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            ac=row["ac"],
            hp=(
                {"current": row["hp_current"], "max": row["hp_max"]}
                if row["hp_current"] is not None
                else None
            ),
            conditions=json.loads(row["conditions"] or "[]"),
            notes=row["notes"] or "",
            consumables=[self._consumable_from_row(c) for c in consumable_rows],
        )

    @staticmethod
    def _consumable_from_row(row: sqlite3.Row) -> Consumable:
        return Consumable(
            id=row["id"],
            name=row["name"],
            charges={"current": row["current_charges"], "max": row["max_charges"]},
            reset_condition=row["reset_condition"],
            recovery_type=row["recovery_type"],
            recovery_amount=row["recovery_amount"],
            description=row["description"] or "",
            notes=row["notes"] or "",
        )

    def save_character(self, character: Character) -> Character:
        """Upsert a character and replace its stored consumables.

        Args:
            character: Character to store.

        Returns:
            The same character.
        """
        with self._get_connection("save_character") as conn:
            self._write_character(conn, character)

        logger.info(
            "Character saved",
            character_id=character.id,
            name=character.name,
            consumables=len(character.consumables),
        )
        return character

    def load_character(self, character_id: str) -> Character | None:
        """Load a character and its consumables.

        Returns:
            The character, or None if no such id is stored.
        """
        with self._get_connection("load_character") as conn:
            return self._read_character(conn, character_id)

    def load_all_characters(self) -> list[Character]:
        """Load every stored character, ordered by name."""
        with self._get_connection("load_all_characters") as conn:
            ids = [row["id"] for row in conn.execute("SELECT id FROM characters ORDER BY name")]
            characters = [self._read_character(conn, character_id) for character_id in ids]
        return [c for c in characters if c is not None]

    def delete_character(self, character_id: str) -> bool:
        """Delete a character, its consumables and its combat seats.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection("delete_character") as conn:
            deleted = conn.execute(
                "DELETE FROM characters WHERE id = ?", (character_id,)
            ).rowcount > 0

        if deleted:
            logger.info("Character deleted", character_id=character_id)
        return deleted

    def move_consumable(
        self,
        consumable_id: str,
        from_character_id: str,
        to_character_id: str,
    ) -> bool:
        """Hand a stored consumable to another character.

        The consumable goes to the end of the receiving character's list.

        Returns:
            True if the consumable was owned by ``from_character_id`` and moved.
        """
        with self._get_connection("move_consumable") as conn:
            moved = conn.execute("""
                UPDATE consumables
                SET character_id = ?,
                    position = (
                        SELECT COALESCE(MAX(position), -1) + 1
                        FROM consumables WHERE character_id = ?
                    )
                WHERE id = ? AND character_id = ?
            """, (to_character_id, to_character_id, consumable_id, from_character_id)).rowcount > 0

        if moved:
            logger.info(
                "Consumable moved",
                consumable_id=consumable_id,
                from_character=from_character_id,
                to_character=to_character_id,
            )
        return moved

    # =========================================================================
    # Combat Operations
    # =========================================================================

    def save_combat(self, combat: Combat) -> Combat:
        """Upsert a combat and replace its participants.

        Participating characters are saved in the same transaction. Saving
        an active combat deactivates every other combat.

        Returns:
            The same combat.
        """
        with self._get_connection("save_combat") as conn:
            if combat.is_active:
                conn.execute(
                    "UPDATE combats SET is_active = 0 WHERE is_active = 1 AND id != ?",
                    (combat.id,),
                )

            conn.execute("""
                INSERT INTO combats
                (id, name, current_round, current_turn_index, is_active, turn_tracking)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    current_round = excluded.current_round,
                    current_turn_index = excluded.current_turn_index,
                    is_active = excluded.is_active,
                    turn_tracking = excluded.turn_tracking
            """, (
                combat.id,
                combat.name or DEFAULT_COMBAT_NAME,
                combat.current_round,
                combat.current_turn_index,
                int(combat.is_active),
                str(combat.turn_tracking),
            ))

            conn.execute("DELETE FROM combat_participants WHERE combat_id = ?", (combat.id,))
            for position, participant in enumerate(combat.participants):
                self._write_character(conn, participant.character)
                conn.execute("""
                    INSERT INTO combat_participants
                    (combat_id, character_id, position, initiative, is_active, joined_round)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, (
                    combat.id,
                    participant.character.id,
                    position,
                    participant.initiative,
                    int(participant.is_active),
                    participant.joined_round,
                ))

        logger.info(
            "Combat saved",
            combat_id=combat.id,
            round=combat.current_round,
            participants=len(combat.participants),
        )
        return combat

    def _read_combat(self, conn: sqlite3.Connection, row: sqlite3.Row) -> Combat:
        participant_rows = conn.execute("""
            SELECT character_id, initiative, is_active, joined_round
            FROM combat_participants
            WHERE combat_id = ?
            ORDER BY initiative DESC, position ASC
        """, (row["id"],)).fetchall()

        participants = []
        for participant_row in participant_rows:
            character = self._read_character(conn, participant_row["character_id"])
            if character is None:
                continue
            participants.append(
                Participant(
                    character=character,
                    initiative=participant_row["initiative"],
                    is_active=bool(participant_row["is_active"]),
                    joined_round=participant_row["joined_round"] or 1,
                )
            )

        return Combat(
            id=row["id"],
            name=row["name"],
            participants=participants,
            current_round=row["current_round"] or 0,
            current_turn_index=row["current_turn_index"] or 0,
            is_active=bool(row["is_active"]),
            turn_tracking=row["turn_tracking"],
        )

    def load_combat(self, combat_id: str) -> Combat | None:
        """Load a combat with its participants in initiative order."""
        with self._get_connection("load_combat") as conn:
            row = conn.execute("SELECT * FROM combats WHERE id = ?", (combat_id,)).fetchone()
            if row is None:
                return None
            return self._read_combat(conn, row)

    def load_active_combat(self) -> Combat | None:
        """Load the combat currently flagged active, if any."""
        with self._get_connection("load_active_combat") as conn:
            row = conn.execute("SELECT * FROM combats WHERE is_active = 1 LIMIT 1").fetchone()
            if row is None:
                return None
            return self._read_combat(conn, row)

    def delete_combat(self, combat_id: str) -> bool:
        """Delete a combat and its participant rows (characters are kept)."""
        with self._get_connection("delete_combat") as conn:
            deleted = conn.execute("DELETE FROM combats WHERE id = ?", (combat_id,)).rowcount > 0

        if deleted:
            logger.info("Combat deleted", combat_id=combat_id)
        return deleted

    # =========================================================================
    # Scenario Operations
    # =========================================================================

    def save_scenario(self, scenario: ScenarioRecord) -> ScenarioRecord:
        """Insert or update a scenario.

        Raises:
            StorageError: If another scenario is already active.
        """
        params: tuple[Any, ...] = (
            scenario.name,
            int(scenario.is_active),
            scenario.start_time,
            scenario.elapsed_time,
        )
        with self._get_connection("save_scenario") as conn:
            if scenario.id is None:
                cursor = conn.execute("""
                    INSERT INTO scenarios (name, is_active, start_time, elapsed_time)
                    VALUES (?, ?, ?, ?)
                """, params)
                scenario.id = cursor.lastrowid
            else:
                conn.execute("""
                    UPDATE scenarios
                    SET name = ?, is_active = ?, start_time = ?, elapsed_time = ?
                    WHERE id = ?
                """, (*params, scenario.id))

        logger.info("Scenario saved", scenario_id=scenario.id, name=scenario.name)
        return scenario

    def load_active_scenario(self) -> ScenarioRecord | None:
        with self._get_connection("load_active_scenario") as conn:
            row = conn.execute("SELECT * FROM scenarios WHERE is_active = 1 LIMIT 1").fetchone()
            return ScenarioRecord.from_row(row) if row is not None else None

    def deactivate_all_scenarios(self) -> int:
        """Clear the active flag on every scenario.

        Returns:
            Number of scenarios that were active.
        """
        with self._get_connection("deactivate_all_scenarios") as conn:
            return conn.execute("UPDATE scenarios SET is_active = 0 WHERE is_active = 1").rowcount

    # =========================================================================
    # Bulk Recovery
    # =========================================================================

    def _recover(self, operation: str, expected: ResetType, condition: str) -> int:
        if reset_type_for(condition) != expected:
            logger.warning("Ignoring mismatched reset condition", operation=operation, condition=condition)
            return 0

        with self._get_connection(operation) as conn:
            updated = conn.execute(_RECOVER_SQL, (condition,)).rowcount

        logger.info("Stored consumables recovered", condition=condition, consumables=updated)
        return updated

    def trigger_rest(self, rest_type: str) -> int:
        """Recover every stored consumable that resets on ``rest_type``.

        Returns:
            Number of consumable rows updated.
        """
        return self._recover("trigger_rest", ResetType.REST, rest_type)

    def trigger_time_recovery(self, time_condition: str) -> int:
        """Recover every stored consumable that resets at ``time_condition``.

        Returns:
            Number of consumable rows updated.
        """
        return self._recover("trigger_time_recovery", ResetType.TIME, time_condition)


__all__ = [
    "Database",
    "ScenarioRecord",
]
