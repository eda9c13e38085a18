"""Broadcast rest and time-of-day recovery across a group of characters.

Example:
    >>> trigger_rest(party, "long_rest")
    3
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dnd_keeper.core.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Iterable

    from dnd_keeper.models.character import Character
    from dnd_keeper.models.consumable import Consumable

logger = get_logger(__name__)


def _distinct(characters: Iterable[Character]) -> list[Character]:
    """Drop repeated references so every character is visited once."""
    seen: set[int] = set()
    result = []
    for character in characters:
        if id(character) not in seen:
            seen.add(id(character))
            result.append(character)
    return result


def trigger_rest(characters: Iterable[Character], rest_type: str) -> int:
    """Let every character take a rest.

    Args:
        characters: Characters taking the rest.
        rest_type: ``long_rest`` or ``short_rest``.

    Returns:
        Number of consumables recovered.
    """
    recovered: list[Consumable] = []
    for character in _distinct(characters):
        recovered.extend(character.rest(rest_type))

    logger.info("Rest taken", rest_type=rest_type, recovered=len(recovered))
    return len(recovered)


def trigger_time_recovery(characters: Iterable[Character], time_condition: str) -> int:
    """Apply a time-of-day reset (``dawn``/``dusk``) to every character.

    Returns:
        Number of consumables recovered.
    """
    recovered: list[Consumable] = []
    for character in _distinct(characters):
        recovered.extend(character.time_recovery(time_condition))

    logger.info("Time recovery applied", condition=time_condition, recovered=len(recovered))
    return len(recovered)


__all__ = [
    "trigger_rest",
    "trigger_time_recovery",
]
