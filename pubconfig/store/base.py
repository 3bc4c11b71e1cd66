"""Configuration store contract consumed by the editor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pubconfig.store.exceptions import InvalidDocumentIdError


@runtime_checkable
class ConfigStore(Protocol):
    """Key/value document store with an append-only version list per document."""

    def load(self, document_id: str) -> dict[str, Any]:
        ...

    def save(self, document_id: str, document: dict[str, Any]) -> int:
        ...

    def list_versions(self, document_id: str) -> list[int]:
        ...

    def load_version(self, document_id: str, version: int) -> dict[str, Any]:
        ...


@dataclass(frozen=True, slots=True)
class Publisher:
    """Entry of the publisher directory."""

    id: str
    alias: str
    file: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "alias": self.alias, "file": self.file}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Publisher":
        return cls(
            id=str(raw.get("id", "")),
            alias=str(raw.get("alias", "")),
            file=str(raw.get("file", "")),
        )


def filter_publishers(publishers: list[Publisher], query: str | None) -> list[Publisher]:
    """Case-insensitive substring search over id and alias."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(publishers)
    return [
        publisher
        for publisher in publishers
        if needle in publisher.id.lower() or needle in publisher.alias.lower()
    ]


def normalize_document_id(raw: str) -> str:
    """Validate a document id and give it a ``.json`` suffix if missing."""
    document_id = (raw or "").strip()
    if not document_id:
        raise InvalidDocumentIdError("document id must be non-empty")
    if "/" in document_id or "\\" in document_id:
        raise InvalidDocumentIdError("document id must not include path separators")
    if document_id in {".", ".."} or document_id.startswith("."):
        raise InvalidDocumentIdError("document id must be a valid file name")
    if not document_id.endswith(".json"):
        document_id = f"{document_id}.json"
    return document_id


def document_stem(document_id: str) -> str:
    return document_id[: -len(".json")] if document_id.endswith(".json") else document_id


def parse_version(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError("version must be a positive integer")
    try:
        version = int(raw)
    except (TypeError, ValueError) as error:
        raise ValueError("version must be a positive integer") from error
    if version <= 0:
        raise ValueError("version must be a positive integer")
    return version
