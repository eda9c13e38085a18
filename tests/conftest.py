"""Pytest configuration and shared fixtures.

This module provides common fixtures for the dnd-keeper test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from dnd_keeper.models import Character, Combat, Consumable


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from dnd_keeper.core.config import Settings
    from dnd_keeper.storage.database import Database


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dnd_keeper.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings pointing at a temporary database."""
    from dnd_keeper.core.config import Settings, StorageSettings

    monkeypatch.chdir(tmp_path)
    return Settings(storage=StorageSettings(database_path=tmp_path / "keeper.db"))


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def fighter() -> Character:
    """A player character with a short-rest ability and spell-like slots."""
    character = Character(name="Aragorn", type="pc", hp=58, ac=18)
    character.add_consumable(
        Consumable(name="Second Wind", charges=1, reset_condition="short_rest")
    )
    character.add_consumable(
        Consumable(name="Action Surge", charges=1, reset_condition="short_rest")
    )
    return character


@pytest.fixture
def ranger() -> Character:
    character = Character(name="Legolas", type="pc", hp=45, ac=16)
    character.add_consumable(
        Consumable(
            name="Hunter's Mark",
            charges={"current": 3, "max": 3},
            reset_condition="long_rest",
        )
    )
    return character


@pytest.fixture
def orc() -> Character:
    return Character(name="Orc Chieftain", type="enemy", hp=85, ac=15)


@pytest.fixture
def lair() -> Character:
    return Character(name="Cave Collapse", type="lair")


@pytest.fixture
def combat(fighter: Character, ranger: Character, orc: Character, lair: Character) -> Combat:
    """Combat with initiatives 17, 22, 12 and 20, not yet started."""
    encounter = Combat(name="Orc Ambush")
    encounter.add_character(fighter, 17)
    encounter.add_character(ranger, 22)
    encounter.add_character(orc, 12)
    encounter.add_character(lair, 20)
    return encounter


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def database(tmp_path: Path) -> Database:
    """A fresh SQLite database in a temporary directory."""
    from dnd_keeper.storage.database import Database

    return Database(tmp_path / "keeper.db")
