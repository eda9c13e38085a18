"""Bounded ``current/max`` pools used for charges and hit points.

Both accept either a bare integer (current = max = value) or an explicit
pair, and always keep ``0 <= current <= max``. A maximum below 1 falls back
to the pool's default, so ``0`` means an empty pool of the default size.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dnd_keeper.core.constants import DEFAULT_CHARGES, DEFAULT_HP


class Pool(BaseModel):
    """A clamped counter with a maximum.

    Attributes:
        current: Amount remaining, never below 0 nor above max.
        max: Upper bound, at least 1.
    """

    model_config = ConfigDict(extra="ignore")

    default_value: ClassVar[int] = 1

    current: int = Field(ge=0, description="Amount remaining")
    max: int = Field(ge=1, description="Maximum amount")

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> Any:
        """Accept a scalar, a partial pair or nothing."""
        if data is None:
            return {"current": cls.default_value, "max": cls.default_value}
        if isinstance(data, int) and not isinstance(data, bool):
            data = {"current": data, "max": data}
        if isinstance(data, dict):
            current = data.get("current")
            maximum = data.get("max")
            if current is None and maximum is None:
                current = maximum = cls.default_value
            elif maximum is None:
                maximum = current
            elif current is None:
                current = maximum
            # Clamp before field validation so an empty or overfull pair is not rejected
            if isinstance(maximum, int) and maximum < 1:
                maximum = cls.default_value
            if isinstance(current, int) and isinstance(maximum, int):
                current = min(max(current, 0), maximum)
            return {**data, "current": current, "max": maximum}
        return data

    def adjust(self, delta: int) -> int:
        """Move current by delta, clamped into ``[0, max]``.

        Returns:
            The change actually applied.
        """
        before = self.current
        self.current = min(self.max, max(0, self.current + delta))
        return self.current - before

    def fill(self) -> None:
        """Set current to max."""
        self.current = self.max

    def __str__(self) -> str:
        return f"{self.current}/{self.max}"


class Charges(Pool):
    """Charges of a consumable."""

    default_value: ClassVar[int] = DEFAULT_CHARGES


class HitPoints(Pool):
    """Hit points of a character."""

    default_value: ClassVar[int] = DEFAULT_HP


__all__ = [
    "Pool",
    "Charges",
    "HitPoints",
]
