"""Tests for the normalizing current/max pools."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dnd_keeper.models import Character, Charges, Consumable, HitPoints


class TestPoolConstruction:
    """Scalars, partial pairs and defaults all normalize to one shape."""

    def test_scalar_sets_current_and_max(self) -> None:
        hp = HitPoints.model_validate(85)
        assert (hp.current, hp.max) == (85, 85)

    def test_explicit_pair(self) -> None:
        charges = Charges(current=2, max=4)
        assert (charges.current, charges.max) == (2, 4)

    @pytest.mark.parametrize(
        "data,expected",
        [
            ({"current": 5}, (5, 5)),
            ({"max": 7}, (7, 7)),
            ({}, (1, 1)),
        ],
    )
    def test_partial_pair(self, data: dict[str, int], expected: tuple[int, int]) -> None:
        pool = HitPoints.model_validate(data)
        assert (pool.current, pool.max) == expected

    def test_zero_current_is_kept(self) -> None:
        charges = Charges(current=0, max=3)
        assert charges.current == 0

    def test_overfull_current_is_clamped(self) -> None:
        charges = Charges(current=9, max=3)
        assert charges.current == 3

    @pytest.mark.parametrize(
        "data",
        [0, -3, {"current": 0}, {"max": 0}, {"current": 0, "max": 0}, {"current": -2, "max": -1}],
    )
    def test_max_below_one_falls_back_to_empty_default(self, data: object) -> None:
        charges = Charges.model_validate(data)
        assert (charges.current, charges.max) == (0, 1)

    def test_zero_inputs_build_valid_entities(self) -> None:
        character = Character(name="Zombie", type="enemy", hp=0)
        partial = Character(name="Ghoul", type="enemy", hp={"current": 0})
        consumable = Consumable(name="Empty Wand", charges=0)

        assert str(character.hp) == "0/1"
        assert character.is_down() is True
        assert str(partial.hp) == "0/1"
        assert consumable.get_display_string() == "Empty Wand (0/1)"
        assert consumable.use() is False

    def test_non_numeric_input_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HitPoints.model_validate("lots")


class TestPoolAdjust:
    """adjust() clamps into [0, max] and reports the applied change."""

    def test_adjust_down_clamps_at_zero(self) -> None:
        hp = HitPoints(current=5, max=10)
        assert hp.adjust(-8) == -5
        assert hp.current == 0

    def test_adjust_up_clamps_at_max(self) -> None:
        hp = HitPoints(current=5, max=10)
        assert hp.adjust(20) == 5
        assert hp.current == 10

    def test_fill_and_str(self) -> None:
        charges = Charges(current=1, max=4)
        charges.fill()
        assert str(charges) == "4/4"
