"""Render-category classification for JSON values."""

from __future__ import annotations

from typing import Any

from pubconfig.core.types import FieldKind


def classify_value(value: Any) -> FieldKind:
    """Return the render category of ``value``.

    Booleans are checked first because ``bool`` is a subclass of ``int``.
    ``None`` and any other scalar fall through to ``"primitive"``.
    """
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return "primitive"


def is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
