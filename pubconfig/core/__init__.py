"""Core value model for pubconfig."""

from pubconfig.core.canonical import (
    DocumentSerializationError,
    clone_value,
    document_json,
    normalize,
    parse_document,
    same_serialized_form,
)
from pubconfig.core.classify import classify_value, is_numeric
from pubconfig.core.paths import (
    PathError,
    delete_at_path,
    format_path,
    get_at_path,
    set_at_path,
    to_path,
)
from pubconfig.core.types import (
    DocumentPath,
    FieldKind,
    FieldType,
    NoticeLevel,
    default_for_field_type,
)

__all__ = [
    "DocumentPath",
    "FieldKind",
    "FieldType",
    "NoticeLevel",
    "default_for_field_type",
    "classify_value",
    "is_numeric",
    "DocumentSerializationError",
    "clone_value",
    "document_json",
    "normalize",
    "parse_document",
    "same_serialized_form",
    "PathError",
    "delete_at_path",
    "format_path",
    "get_at_path",
    "set_at_path",
    "to_path",
]
