"""File-system configuration store with per-save version snapshots."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import re
import threading
from typing import Any

from pubconfig.core.canonical import (
    DocumentSerializationError,
    document_json,
    parse_document,
)
from pubconfig.store.base import (
    Publisher,
    document_stem,
    normalize_document_id,
    parse_version,
)
from pubconfig.store.exceptions import DocumentNotFoundError, InvalidDocumentError

logger = logging.getLogger(__name__)

PUBLISHERS_FILE_NAME = "publishers.json"

_VERSION_FILE_RE = re.compile(r"^v(?P<version>[0-9]+)\.json$")


class FileSystemConfigStore:
    """Documents live in ``data_dir``; versions in ``history_dir/<stem>/v<N>.json``."""

    def __init__(
        self,
        data_dir: str | Path,
        history_dir: str | Path | None = None,
        *,
        initialize: bool = False,
    ) -> None:
        self.data_dir = Path(data_dir)
        self.history_dir = Path(history_dir) if history_dir is not None else self.data_dir / "history"
        self._save_lock = threading.Lock()
        if initialize:
            self.initialize_history()

    def initialize_history(self) -> list[str]:
        """Record the current content of untracked documents as version 1."""
        self.history_dir.mkdir(parents=True, exist_ok=True)
        if not self.data_dir.is_dir():
            return []

        initialized: list[str] = []
        for path in sorted(self.data_dir.iterdir()):
            if not path.is_file() or path.suffix != ".json":
                continue
            version_dir = self.history_dir / path.stem
            if version_dir.exists():
                continue

            logger.info("New file detected: %s. Initializing history...", path.name)
            content = path.read_text(encoding="utf-8")
            try:
                json.loads(content)
            except json.JSONDecodeError as error:
                logger.error("Skipping invalid JSON %s: %s", path.name, error)
                continue

            version_dir.mkdir(parents=True, exist_ok=True)
            (version_dir / "v1.json").write_text(content, encoding="utf-8")
            initialized.append(path.name)
        return initialized

    def load(self, document_id: str) -> dict[str, Any]:
        document_id = normalize_document_id(document_id)
        return self._read_document(self.data_dir / document_id, label=document_id)

    def save(self, document_id: str, document: dict[str, Any]) -> int:
        document_id = normalize_document_id(document_id)
        content = document_json(document)
        version_dir = self.history_dir / document_stem(document_id)

        with self._save_lock:
            version_dir.mkdir(parents=True, exist_ok=True)
            existing = self._versions_in(version_dir)
            version = (max(existing) if existing else 0) + 1

            self.data_dir.mkdir(parents=True, exist_ok=True)
            (self.data_dir / document_id).write_text(content, encoding="utf-8")
            (version_dir / f"v{version}.json").write_text(content, encoding="utf-8")

        logger.info("Saved %s as version %d", document_id, version)
        return version

    def list_versions(self, document_id: str) -> list[int]:
        document_id = normalize_document_id(document_id)
        version_dir = self.history_dir / document_stem(document_id)
        if not version_dir.is_dir():
            return []
        return sorted(self._versions_in(version_dir), reverse=True)

    def load_version(self, document_id: str, version: int) -> dict[str, Any]:
        document_id = normalize_document_id(document_id)
        version = parse_version(version)
        path = self.history_dir / document_stem(document_id) / f"v{version}.json"
        return self._read_document(path, label=f"{document_id} version {version}")

    def list_publishers(self) -> list[Publisher]:
        payload = self._read_document(
            self.data_dir / PUBLISHERS_FILE_NAME,
            label=PUBLISHERS_FILE_NAME,
        )
        raw_publishers = payload.get("publishers")
        if not isinstance(raw_publishers, list):
            return []
        return [
            Publisher.from_dict(item)
            for item in raw_publishers
            if isinstance(item, dict)
        ]

    def _read_document(self, path: Path, *, label: str) -> dict[str, Any]:
        if not path.is_file():
            raise DocumentNotFoundError(f"Not found: {label}")
        try:
            raw_text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as error:
            raise InvalidDocumentError(f"{label} is not valid UTF-8 text") from error
        try:
            return parse_document(raw_text, source=label)
        except DocumentSerializationError as error:
            raise InvalidDocumentError(str(error)) from error

    @staticmethod
    def _versions_in(version_dir: Path) -> list[int]:
        versions: list[int] = []
        for child in version_dir.iterdir():
            match = _VERSION_FILE_RE.match(child.name)
            if match and child.is_file():
                versions.append(int(match.group("version")))
        return versions
