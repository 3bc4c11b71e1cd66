"""Configuration store client for the pubconfig HTTP API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from pubconfig.core.canonical import document_json
from pubconfig.store.base import Publisher, normalize_document_id, parse_version
from pubconfig.store.exceptions import (
    DocumentNotFoundError,
    InvalidDocumentError,
    StoreError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


class HttpConfigStore:
    """Talks to ``/api/publisher/...`` endpoints served by ``pubconfig serve``."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def load(self, document_id: str) -> dict[str, Any]:
        document_id = normalize_document_id(document_id)
        payload = self._request("GET", self._document_url(document_id), label=document_id)
        return self._expect_document(payload, label=document_id)

    def save(self, document_id: str, document: dict[str, Any]) -> int:
        document_id = normalize_document_id(document_id)
        payload = self._request(
            "PUT",
            self._document_url(document_id),
            label=document_id,
            data=document_json(document).encode("utf-8"),
            headers={"Content-Type": "application/json; charset=utf-8"},
        )
        if not isinstance(payload, dict) or not payload.get("success"):
            raise StoreError(f"Failed to save {document_id}")
        try:
            return parse_version(payload.get("version"))
        except ValueError as error:
            raise InvalidDocumentError(f"Invalid version in save response for {document_id}") from error

    def list_versions(self, document_id: str) -> list[int]:
        document_id = normalize_document_id(document_id)
        payload = self._request(
            "GET",
            f"{self._document_url(document_id)}/versions",
            label=document_id,
        )
        if not isinstance(payload, list):
            raise InvalidDocumentError(f"Version list for {document_id} must be a JSON array")
        try:
            return sorted((parse_version(item) for item in payload), reverse=True)
        except ValueError as error:
            raise InvalidDocumentError(f"Invalid version list for {document_id}") from error

    def load_version(self, document_id: str, version: int) -> dict[str, Any]:
        document_id = normalize_document_id(document_id)
        version = parse_version(version)
        label = f"{document_id} version {version}"
        payload = self._request(
            "GET",
            f"{self._document_url(document_id)}/versions/{version}",
            label=label,
        )
        return self._expect_document(payload, label=label)

    def list_publishers(self) -> list[Publisher]:
        payload = self._request("GET", f"{self.base_url}/api/publishers", label="publishers")
        raw_publishers = payload.get("publishers") if isinstance(payload, dict) else None
        if not isinstance(raw_publishers, list):
            return []
        return [Publisher.from_dict(item) for item in raw_publishers if isinstance(item, dict)]

    def _document_url(self, document_id: str) -> str:
        return f"{self.base_url}/api/publisher/{quote(document_id)}"

    def _request(self, method: str, url: str, *, label: str, **kwargs: Any) -> Any:
        try:
            response = self._session.request(method, url, timeout=self.timeout_seconds, **kwargs)
        except requests.RequestException as error:
            logger.warning("%s %s failed: %s", method, url, error)
            raise StoreUnavailableError(f"Store unreachable at {self.base_url}: {error}") from error

        if response.status_code == 404:
            raise DocumentNotFoundError(f"Not found: {label}")
        if response.status_code == 422:
            raise InvalidDocumentError(_error_message(response) or f"{label} is not valid JSON")
        if response.status_code >= 400:
            message = _error_message(response) or f"HTTP {response.status_code}"
            raise StoreError(f"{method} {label} failed: {message}")

        try:
            return response.json()
        except ValueError as error:
            raise InvalidDocumentError(f"{label} response is not valid JSON") from error

    @staticmethod
    def _expect_document(payload: Any, *, label: str) -> dict[str, Any]:
        if not isinstance(payload, dict):
            raise InvalidDocumentError(f"{label} must contain a JSON object")
        return payload


def _error_message(response: requests.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return None
