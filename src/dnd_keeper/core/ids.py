"""Identity generation for characters, consumables and combats."""

from __future__ import annotations

from uuid import uuid4


def generate_id() -> str:
    """Return a new opaque, unique entity id."""
    return uuid4().hex


__all__ = ["generate_id"]
