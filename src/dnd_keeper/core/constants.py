"""Application-wide constants for dnd-keeper."""

from __future__ import annotations

# =============================================================================
# Character Defaults
# =============================================================================

DEFAULT_HP = 1
"""Hit points given to a character created without any."""

DEFAULT_AC = 10
"""Armor class given to a character created without one."""

DEFAULT_CHARGES = 1
"""Charges given to a consumable created without any."""

# =============================================================================
# Display
# =============================================================================

DISPLAY_COLORS: dict[str, str] = {
    "pc": "#4CAF50",
    "enemy": "#F44336",
    "lair": "#FF9800",
}
"""Initiative tracker color per character type."""

UNKNOWN_DISPLAY_COLOR = "#757575"
"""Color for character types without an entry in DISPLAY_COLORS."""

NO_HP_DISPLAY = "N/A"
"""HP text shown for characters without hit points (lair actions)."""

# =============================================================================
# Combat & Storage
# =============================================================================

DEFAULT_COMBAT_NAME = "Combat Encounter"
"""Name stored for combats created without one."""

DATABASE_VERSION = 1
"""Schema version stamped into db_metadata."""


__all__ = [
    "DEFAULT_HP",
    "DEFAULT_AC",
    "DEFAULT_CHARGES",
    "DISPLAY_COLORS",
    "UNKNOWN_DISPLAY_COLOR",
    "NO_HP_DISPLAY",
    "DEFAULT_COMBAT_NAME",
    "DATABASE_VERSION",
]
