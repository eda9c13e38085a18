"""Tests for the exception hierarchy and id generation."""

from __future__ import annotations

from dnd_keeper.core.exceptions import (
    CombatError,
    ConfigurationError,
    DndKeeperError,
    GameEngineError,
    StorageError,
)
from dnd_keeper.core.ids import generate_id


class TestDndKeeperError:
    """Tests for the base DndKeeperError exception."""

    def test_basic_message(self) -> None:
        exc = DndKeeperError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        exc = DndKeeperError("Test error", details={"key": "value", "count": 42})
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        repr_str = repr(DndKeeperError("Test", details={"x": 1}))
        assert "DndKeeperError" in repr_str
        assert "x" in repr_str


class TestDomainExceptions:
    """Tests for domain-specific exceptions."""

    def test_combat_error_context(self) -> None:
        exc = CombatError("Combat not found", combat_id="abc", round_number=3)
        assert exc.details == {"combat_id": "abc", "round_number": 3}
        assert isinstance(exc, GameEngineError)
        assert isinstance(exc, DndKeeperError)

    def test_storage_error_operation(self) -> None:
        exc = StorageError("Write failed", operation="save_character")
        assert exc.details["operation"] == "save_character"
        assert isinstance(exc, DndKeeperError)

    def test_configuration_error_key(self) -> None:
        exc = ConfigurationError("Bad value", config_key="log_level")
        assert exc.details["config_key"] == "log_level"


class TestGenerateId:
    """Tests for entity id generation."""

    def test_ids_are_unique_strings(self) -> None:
        ids = {generate_id() for _ in range(1000)}
        assert len(ids) == 1000
        assert all(isinstance(i, str) and i for i in ids)
