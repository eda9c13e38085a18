"""Engine module: recovery dispatch and persistence-backed encounter flow."""

from __future__ import annotations

from dnd_keeper.engine.encounter import EncounterService
from dnd_keeper.engine.recovery import trigger_rest, trigger_time_recovery


__all__ = [
    "EncounterService",
    "trigger_rest",
    "trigger_time_recovery",
]
