"""Tests for the SQLite persistence layer."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from dnd_keeper.core.config import StorageSettings
from dnd_keeper.core.exceptions import StorageError
from dnd_keeper.models import Character, Combat, Consumable
from dnd_keeper.storage import Database, KeeperRepository, ScenarioRecord


class TestDatabaseSetup:
    """Tests for schema creation and construction."""

    def test_creates_file_and_parent(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "keeper.db"
        database = Database(db_path)

        assert db_path.exists()
        assert database.get_schema_version() == 1
        assert isinstance(database, KeeperRepository)

    def test_reopen_keeps_data(self, tmp_path: Path, orc: Character) -> None:
        Database(tmp_path / "keeper.db").save_character(orc)

        reopened = Database(tmp_path / "keeper.db")

        assert reopened.load_character(orc.id) is not None

    def test_from_settings(self, tmp_path: Path) -> None:
        storage = StorageSettings(
            database_path=tmp_path / "configured.db",
            connect_timeout_seconds=1.5,
            max_connect_attempts=2,
        )

        database = Database.from_settings(storage)

        assert database.db_path == tmp_path / "configured.db"
        assert database.timeout_seconds == 1.5
        assert database.max_connect_attempts == 2

    def test_default_path_from_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        database = Database()

        assert database.db_path == Path("data/keeper.db")
        assert (tmp_path / "data" / "keeper.db").exists()

    def test_unopenable_path_raises_storage_error(self, tmp_path: Path) -> None:
        (tmp_path / "keeper.db").mkdir()

        with pytest.raises(StorageError) as exc_info:
            Database(tmp_path / "keeper.db", max_connect_attempts=1)

        assert exc_info.value.details["operation"] == "init_schema"


class TestCharacterStorage:
    """Tests for character and consumable persistence."""

    def test_round_trip(self, database: Database) -> None:
        character = Character(
            name="Gandalf",
            type="pc",
            hp={"current": 40, "max": 62},
            ac=14,
            conditions=["Blessed", "Concentrating", "Invisible"],
            notes="Carries a staff",
        )
        character.add_consumable(
            Consumable(
                name="Spell Slot (3rd)",
                charges={"current": 1, "max": 3},
                reset_condition="long_rest",
                description="Third level slots",
            )
        )
        character.add_consumable(
            Consumable(name="Arcane Recovery", charges=1, reset_condition="dawn", recovery_type=2)
        )

        database.save_character(character)
        loaded = database.load_character(character.id)

        assert loaded is not None
        assert loaded is not character
        assert loaded.model_dump() == character.model_dump()

    def test_load_missing(self, database: Database) -> None:
        assert database.load_character("missing") is None

    def test_lair_round_trip(self, database: Database, lair: Character) -> None:
        database.save_character(lair)
        loaded = database.load_character(lair.id)

        assert loaded.hp is None
        assert loaded.ac is None
        assert loaded.get_hp_display() is None

    def test_resave_replaces_consumables(self, database: Database, fighter: Character) -> None:
        database.save_character(fighter)
        fighter.remove_consumable(fighter.consumables[0].id)
        fighter.add_consumable(Consumable(name="Indomitable", reset_condition="long_rest"))
        database.save_character(fighter)

        loaded = database.load_character(fighter.id)

        assert [c.name for c in loaded.consumables] == ["Action Surge", "Indomitable"]

    def test_consumable_order_preserved(self, database: Database) -> None:
        character = Character(name="Sorcerer")
        for name in ["Zeta", "Alpha", "Mu"]:
            character.add_consumable(Consumable(name=name))
        database.save_character(character)

        loaded = database.load_character(character.id)

        assert [c.name for c in loaded.consumables] == ["Zeta", "Alpha", "Mu"]

    def test_load_all_ordered_by_name(
        self,
        database: Database,
        orc: Character,
        fighter: Character,
        ranger: Character,
    ) -> None:
        for character in (orc, fighter, ranger):
            database.save_character(character)

        names = [c.name for c in database.load_all_characters()]

        assert names == ["Aragorn", "Legolas", "Orc Chieftain"]

    def test_delete_cascades(self, database: Database, fighter: Character) -> None:
        database.save_character(fighter)

        assert database.delete_character(fighter.id) is True
        assert database.delete_character(fighter.id) is False
        assert database.load_character(fighter.id) is None

        with sqlite3.connect(database.db_path) as conn:
            count = conn.execute("SELECT COUNT(*) FROM consumables").fetchone()[0]
        assert count == 0

    def test_move_consumable(self, database: Database, fighter: Character, ranger: Character) -> None:
        database.save_character(fighter)
        database.save_character(ranger)
        second_wind = fighter.consumables[0]

        assert database.move_consumable(second_wind.id, fighter.id, ranger.id) is True
        assert database.move_consumable(second_wind.id, fighter.id, ranger.id) is False

        assert [c.name for c in database.load_character(fighter.id).consumables] == ["Action Surge"]
        assert [c.name for c in database.load_character(ranger.id).consumables] == [
            "Hunter's Mark",
            "Second Wind",
        ]


class TestCombatStorage:
    """Tests for combat persistence."""

    def test_round_trip(self, database: Database, combat: Combat) -> None:
        combat.start_combat()
        combat.next_turn()
        database.save_combat(combat)

        loaded = database.load_combat(combat.id)

        assert loaded is not None
        assert loaded.name == "Orc Ambush"
        assert loaded.is_active is True
        assert loaded.current_round == 1
        assert loaded.current_turn_index == 1
        assert [p.initiative for p in loaded.participants] == [22, 20, 17, 12]
        assert loaded.get_current_character().name == "Cave Collapse"

    def test_participants_saved_with_combat(self, database: Database, combat: Combat, orc: Character) -> None:
        orc.take_damage(30)
        database.save_combat(combat)

        assert database.load_character(orc.id).hp.current == 55

    def test_removed_participant_dropped(self, database: Database, combat: Combat, orc: Character) -> None:
        database.save_combat(combat)
        combat.remove_character(orc.id)
        database.save_combat(combat)

        loaded = database.load_combat(combat.id)

        assert loaded.get_participant(orc.id) is None
        assert database.load_character(orc.id) is not None

    def test_tied_initiative_order_preserved(self, database: Database) -> None:
        combat = Combat()
        for name in ["First", "Second", "Third"]:
            combat.add_character(Character(name=name), 10)
        database.save_combat(combat)

        loaded = database.load_combat(combat.id)

        assert [p.character.name for p in loaded.participants] == ["First", "Second", "Third"]

    def test_single_active_combat(self, database: Database, fighter: Character, orc: Character) -> None:
        first = Combat(name="First")
        first.add_character(fighter, 10)
        first.start_combat()
        second = Combat(name="Second")
        second.add_character(orc, 10)
        second.start_combat()

        database.save_combat(first)
        database.save_combat(second)

        assert database.load_active_combat().id == second.id
        assert database.load_combat(first.id).is_active is False

    def test_unnamed_combat_gets_default_name(self, database: Database) -> None:
        combat = Combat()
        database.save_combat(combat)

        assert database.load_combat(combat.id).name == "Combat Encounter"

    def test_delete_keeps_characters(self, database: Database, combat: Combat, fighter: Character) -> None:
        database.save_combat(combat)

        assert database.delete_combat(combat.id) is True
        assert database.load_combat(combat.id) is None
        assert database.load_character(fighter.id) is not None
        assert database.delete_combat(combat.id) is False

    def test_deleting_character_removes_seat(self, database: Database, combat: Combat, orc: Character) -> None:
        database.save_combat(combat)
        database.delete_character(orc.id)

        loaded = database.load_combat(combat.id)

        assert len(loaded.participants) == 3


class TestScenarioStorage:
    """Tests for scenario persistence."""

    def test_save_and_load_active(self, database: Database) -> None:
        scenario = database.save_scenario(ScenarioRecord(name="Lost Mine", is_active=True))

        assert scenario.id is not None
        loaded = database.load_active_scenario()
        assert loaded.name == "Lost Mine"
        assert loaded.elapsed_time == 0

    def test_update_existing(self, database: Database) -> None:
        scenario = database.save_scenario(ScenarioRecord(name="Lost Mine", is_active=True))
        scenario.elapsed_time = 3600
        database.save_scenario(scenario)

        assert database.load_active_scenario().elapsed_time == 3600

    def test_second_active_scenario_rejected(self, database: Database) -> None:
        database.save_scenario(ScenarioRecord(name="One", is_active=True))

        with pytest.raises(StorageError):
            database.save_scenario(ScenarioRecord(name="Two", is_active=True))

    def test_deactivate_all(self, database: Database) -> None:
        database.save_scenario(ScenarioRecord(name="One", is_active=True))
        database.save_scenario(ScenarioRecord(name="Two"))

        assert database.deactivate_all_scenarios() == 1
        assert database.load_active_scenario() is None


class TestBulkRecovery:
    """Stored recovery matches in-memory recovery."""

    @pytest.fixture
    def stored(self, database: Database) -> Character:
        character = Character(name="Cleric")
        character.add_consumable(Consumable(name="Slots", charges={"current": 0, "max": 4}))
        character.add_consumable(
            Consumable(name="Hit Dice", charges={"current": 0, "max": 5}, recovery_type="dice")
        )
        character.add_consumable(
            Consumable(
                name="Channel Divinity",
                charges={"current": 0, "max": 2},
                reset_condition="short_rest",
            )
        )
        character.add_consumable(
            Consumable(
                name="Staff",
                charges={"current": 1, "max": 10},
                reset_condition="dawn",
                recovery_type="fixed",
                recovery_amount=3,
            )
        )
        character.add_consumable(
            Consumable(
                name="Wand",
                charges={"current": 5, "max": 7},
                reset_condition="dawn",
                recovery_type=4,
            )
        )
        return database.save_character(character)

    def test_long_rest(self, database: Database, stored: Character) -> None:
        assert database.trigger_rest("long_rest") == 2

        loaded = database.load_character(stored.id)
        expected = stored.model_copy(deep=True)
        expected.rest("long_rest")

        assert loaded.model_dump() == expected.model_dump()
        assert [c.charges.current for c in loaded.consumables] == [4, 3, 0, 1, 5]

    def test_dawn(self, database: Database, stored: Character) -> None:
        assert database.trigger_time_recovery("dawn") == 2

        loaded = database.load_character(stored.id)

        assert [c.charges.current for c in loaded.consumables] == [0, 0, 0, 4, 7]

    def test_mismatched_trigger_is_ignored(self, database: Database, stored: Character) -> None:
        assert database.trigger_rest("dawn") == 0
        assert database.trigger_time_recovery("long_rest") == 0
        assert database.trigger_rest("never") == 0

        loaded = database.load_character(stored.id)
        assert loaded.model_dump() == stored.model_dump()
