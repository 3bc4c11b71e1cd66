"""Synthesis of new array items from their siblings' shape."""

from __future__ import annotations

from typing import Any


def zero_value_like(value: Any) -> Any:
    """Structural copy of ``value`` with every scalar leaf reset to its type's zero value."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return 0
    if isinstance(value, float):
        return 0.0
    if isinstance(value, str):
        return ""
    if isinstance(value, dict):
        return {str(key): zero_value_like(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [zero_value_like(item) for item in value]
    return None


def item_template(items: list[Any]) -> Any:
    """New item shaped like the last existing one; ``""`` for an empty array."""
    if not items:
        return ""
    return zero_value_like(items[-1])
