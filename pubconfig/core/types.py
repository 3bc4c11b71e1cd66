"""Type definitions shared by the editor, diff and store layers."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Union

PathToken = Union[str, int]
DocumentPath = tuple[PathToken, ...]

FieldKind = Literal["boolean", "array", "object", "primitive"]

NoticeLevel = Literal["success", "error", "info"]


class FieldType(str, Enum):
    """Value types offered when adding a new field."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"

    @classmethod
    def parse(cls, raw: "str | FieldType") -> "FieldType":
        if isinstance(raw, FieldType):
            return raw
        normalized = str(raw).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        allowed = ", ".join(member.value for member in cls)
        raise ValueError(f"Unsupported field type: {raw!r} (expected one of {allowed})")


def default_for_field_type(field_type: "str | FieldType") -> Any:
    """Return a fresh default value for a newly added field."""
    parsed = FieldType.parse(field_type)
    if parsed is FieldType.NUMBER:
        return 0
    if parsed is FieldType.BOOLEAN:
        return False
    if parsed is FieldType.ARRAY:
        return []
    if parsed is FieldType.OBJECT:
        return {}
    return ""
