"""Deterministic serialization helpers for configuration documents."""

from __future__ import annotations

import json
import math
from typing import Any

DOCUMENT_INDENT = 2


class DocumentSerializationError(ValueError):
    """Raised when text cannot be decoded into a configuration document."""


def normalize(value: Any) -> Any:
    """Normalize values the way a browser ``JSON.stringify`` would see them.

    Key order is preserved, tuples become lists, keys become strings and
    non-finite floats become ``None``.
    """
    if isinstance(value, dict):
        return {str(key): normalize(item) for key, item in value.items()}

    if isinstance(value, (list, tuple)):
        return [normalize(item) for item in value]

    if isinstance(value, bool) or value is None:
        return value

    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None

    return value


def document_json(value: Any) -> str:
    """Serialize a document with 2-space indentation in document key order."""
    return json.dumps(
        normalize(value),
        indent=DOCUMENT_INDENT,
        ensure_ascii=False,
    )


def parse_document(text: str, *, source: str = "document") -> dict[str, Any]:
    """Parse text into a document mapping."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise DocumentSerializationError(f"{source} is not valid JSON ({error})") from error

    if not isinstance(payload, dict):
        raise DocumentSerializationError(
            f"{source} must contain a JSON object, got {type(payload).__name__}"
        )
    return payload


def clone_value(value: Any) -> Any:
    """Deep copy through the serialized form, as the editor baseline does."""
    return json.loads(json.dumps(normalize(value), ensure_ascii=False))


def same_serialized_form(left: Any, right: Any) -> bool:
    return document_json(left) == document_json(right)
