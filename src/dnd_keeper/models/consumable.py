"""Consumable resources: spell slots, per-rest abilities, limited-use items.

A Consumable is a named charge pool with a reset policy. Every operation is
total: running out of charges is reported through the return value, and
recovery never overfills or underflows the pool.

Example:
    >>> second_wind = Consumable(name="Second Wind", charges=1, reset_condition="short_rest")
    >>> second_wind.use()
    True
    >>> second_wind.get_display_string()
    'Second Wind (0/1)'
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, computed_field

from dnd_keeper.core.ids import generate_id
from dnd_keeper.models.enums import RecoveryType, ResetCondition, ResetType
from dnd_keeper.models.pools import Charges


class Consumable(BaseModel):
    """An expendable resource owned by a single character.

    Attributes:
        id: Unique consumable identifier.
        name: Display name.
        charges: Current and maximum charges.
        reset_condition: Event that triggers recovery.
        recovery_type: ``full``, ``dice``, ``fixed`` or a bare charge count.
        recovery_amount: Charges regained by the ``fixed`` recovery type.
        description: What the resource does.
        notes: Free-form DM notes.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=generate_id, description="Unique consumable ID")
    name: str = Field(min_length=1, description="Display name")
    charges: Charges = Field(default_factory=Charges, description="Charge pool")
    reset_condition: ResetCondition = Field(
        default=ResetCondition.LONG_REST,
        description="When charges are restored",
    )
    recovery_type: RecoveryType | int = Field(
        default=RecoveryType.FULL,
        description="How many charges are restored",
    )
    recovery_amount: int | None = Field(default=None, description="Charges for fixed recovery")
    description: str = Field(default="", description="What the resource does")
    notes: str = Field(default="", description="DM notes")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def reset_type(self) -> ResetType:
        """Whether the consumable resets on rests, at a time of day, or never."""
        return self.reset_condition.reset_type

    def can_use(self, amount: int = 1) -> bool:
        """Check whether ``amount`` charges are available."""
        return self.charges.current >= amount

    def use(self, amount: int = 1) -> bool:
        """Spend charges.

        Args:
            amount: Charges to spend. Non-positive amounts spend nothing.

        Returns:
            True if the charges were spent, False if not enough remained.
        """
        if amount <= 0:
            return True
        if not self.can_use(amount):
            return False
        self.charges.current -= amount
        return True

    def recovery_gain(self) -> int:
        """Charges a single recovery would add before capping at max."""
        if self.recovery_type == RecoveryType.FULL:
            return self.charges.max
        if self.recovery_type == RecoveryType.DICE:
            # TODO: roll recovery_amount dice once a dice engine exists
            return math.ceil(self.charges.max / 2)
        if self.recovery_type == RecoveryType.FIXED:
            return self.recovery_amount or 0
        return int(self.recovery_type)

    def recover(self) -> None:
        """Restore charges according to the recovery type."""
        self.charges.adjust(self.recovery_gain())

    def get_display_string(self) -> str:
        """Format as ``"<name> (<current>/<max>)"``."""
        return f"{self.name} ({self.charges})"


__all__ = ["Consumable"]
