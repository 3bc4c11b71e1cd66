"""Edit session: load, live editing, change detection, save and compare."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Any, Iterable, Literal

from pubconfig.config import DEFAULT_REQUIRED_FIELDS
from pubconfig.core.canonical import clone_value, document_json, same_serialized_form
from pubconfig.core.paths import PathError, format_path, to_path
from pubconfig.core.types import FieldType
from pubconfig.diff.compare import BaselineSupersededError, CompareView
from pubconfig.diff.models import LineDiffResult
from pubconfig.editor.document import DocumentEditor
from pubconfig.editor.exceptions import ValidationError
from pubconfig.editor.model import DocumentModel
from pubconfig.editor.widgets import Widget
from pubconfig.notices import NoticeBoard, Notifier
from pubconfig.store.base import ConfigStore, normalize_document_id
from pubconfig.store.exceptions import InvalidDocumentError, StoreError

logger = logging.getLogger(__name__)

SaveStatus = Literal["saved", "unchanged", "busy", "error", "unloaded"]


@dataclass(slots=True)
class SaveResult:
    status: SaveStatus
    version: int | None = None
    message: str = ""

    @property
    def saved(self) -> bool:
        return self.status == "saved"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "version": self.version,
            "message": self.message,
        }


class EditSession:
    """One document edited in place, with a baseline snapshot for change detection.

    Failures are scoped to the operation that raised them: they surface as a
    notice and leave the session in its last good state.
    """

    def __init__(
        self,
        store: ConfigStore,
        *,
        required_fields: Iterable[str] = DEFAULT_REQUIRED_FIELDS,
        notifier: Notifier | None = None,
    ) -> None:
        self.store = store
        self.required_fields = tuple(required_fields)
        self.notifier: Notifier = notifier or NoticeBoard()
        self._lock = threading.RLock()
        self._save_lock = threading.Lock()
        self._document_id: str | None = None
        self._model: DocumentModel | None = None
        self._baseline: dict[str, Any] | None = None
        self._root: DocumentEditor | None = None
        self._compare_view: CompareView | None = None

    @property
    def document_id(self) -> str | None:
        return self._document_id

    @property
    def loaded(self) -> bool:
        return self._model is not None

    @property
    def root(self) -> DocumentEditor | None:
        return self._root

    def load(self, document_id: str) -> bool:
        try:
            normalized_id = normalize_document_id(document_id)
            document = self.notifier.with_loading(lambda: self.store.load(normalized_id))
        except InvalidDocumentError as error:
            self.notifier.notify(f"Configuration could not be parsed: {error}", "error")
            return False
        except StoreError as error:
            self.notifier.notify(f"Failed to fetch publisher configuration: {error}", "error")
            return False

        with self._lock:
            self._install(normalized_id, document)
        return True

    def render(self, document_id: str | None = None) -> Widget | None:
        """Load ``document_id`` if it is not the open document, then render the form."""
        if document_id is not None:
            try:
                requested = normalize_document_id(document_id)
            except StoreError as error:
                self.notifier.notify(str(error), "error")
                return None
            if requested != self._document_id or not self.loaded:
                if not self.load(requested):
                    return None
        with self._lock:
            if self._root is None:
                return None
            return self._root.render()

    def get_current_document(self) -> dict[str, Any] | None:
        with self._lock:
            if self._model is None:
                return None
            return clone_value(self._model.root)

    @property
    def baseline(self) -> dict[str, Any] | None:
        with self._lock:
            return clone_value(self._baseline) if self._baseline is not None else None

    def has_unsaved_changes(self) -> bool:
        with self._lock:
            if self._model is None or self._baseline is None:
                return False
            return not same_serialized_form(self._baseline, self._model.root)

    def preview_json(self) -> str:
        with self._lock:
            if self._model is None:
                return ""
            return document_json(self._model.root)

    def apply(self, action: str, path: Iterable[Any] = (), payload: dict[str, Any] | None = None) -> bool:
        """Route a UI action to the editor at ``path``; False if it was rejected."""
        with self._lock:
            if self._root is None:
                self.notifier.notify("No configuration is loaded", "error")
                return False
            try:
                target_path = to_path(path)
                editor = self._root.find(target_path, action)
                if editor is None:
                    raise ValidationError(
                        f"No editor accepts {action!r} at {format_path(target_path) or '/'}"
                    )
                editor.handle(action, dict(payload or {}))
            except (ValidationError, PathError) as error:
                self.notifier.notify(str(error), "error")
                return False
            return True

    def add_field(self, key: str, field_type: str | FieldType = FieldType.STRING) -> bool:
        return self.apply("add_field", (), {"key": key, "field_type": field_type})

    def remove_field(self, key: str) -> bool:
        return self.apply("remove_field", (), {"key": key})

    def save_changes(self) -> SaveResult:
        if not self._save_lock.acquire(blocking=False):
            return SaveResult(status="busy", message="A save is already in progress")
        try:
            return self._save()
        finally:
            self._save_lock.release()

    def _save(self) -> SaveResult:
        with self._lock:
            if self._model is None or self._document_id is None:
                self.notifier.notify("No configuration is loaded", "error")
                return SaveResult(status="unloaded", message="No configuration is loaded")
            if not self.has_unsaved_changes():
                self.notifier.notify("No changes were made", "info")
                return SaveResult(status="unchanged", message="No changes were made")
            document_id = self._document_id
            snapshot = clone_value(self._model.root)
            revision = self._model.revision

        try:
            version = self.notifier.with_loading(lambda: self.store.save(document_id, snapshot))
        except StoreError as error:
            logger.warning("Save failed for %s: %s", document_id, error)
            self.notifier.notify("Failed to save configuration.", "error")
            return SaveResult(status="error", message=str(error))

        with self._lock:
            if self._model is not None and self._model.revision == revision:
                self._install(document_id, snapshot)
            else:
                self._baseline = clone_value(snapshot)
                self._compare_view = None
        self.notifier.notify("Configuration saved successfully!", "success")
        return SaveResult(status="saved", version=version, message=f"Saved version {version}")

    def compare_view(self) -> CompareView | None:
        with self._lock:
            if self._model is None or self._document_id is None or self._baseline is None:
                return None
            if self._compare_view is None:
                self._compare_view = CompareView(
                    self.store,
                    self._document_id,
                    baseline=self._baseline,
                    current=self.get_current_document,
                    notifier=self.notifier,
                )
            return self._compare_view

    def compare(self, against: Any = None) -> LineDiffResult | None:
        """Diff current edits against the baseline, switching it first if asked.

        Raises :class:`BaselineSupersededError` when a newer switch request
        won while this one was fetching; the caller should drop the response.
        """
        view = self.compare_view()
        if view is None:
            self.notifier.notify("No configuration is loaded", "error")
            return None
        if against is not None:
            try:
                selected = view.select_baseline(against)
            except (StoreError, ValueError) as error:
                self.notifier.notify(f"Failed to load version content: {error}", "error")
                return None
            if not selected:
                raise BaselineSupersededError(f"Baseline {against!r} was superseded")
        return view.diff()

    def available_versions(self) -> list[int]:
        view = self.compare_view()
        if view is None:
            return []
        try:
            return view.available_versions()
        except StoreError as error:
            logger.warning("Failed to load versions for %s: %s", self._document_id, error)
            return []

    def _install(self, document_id: str, document: dict[str, Any]) -> None:
        if self._root is not None:
            self._root.destroy()
        self._document_id = document_id
        self._model = DocumentModel(document)
        self._baseline = clone_value(document)
        self._root = DocumentEditor(self._model, required_fields=self.required_fields)
        self._root.mount()
        self._compare_view = None
