"""Baseline-switching comparison view over the configuration store."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from pubconfig.core.canonical import clone_value
from pubconfig.diff.engine import diff_documents
from pubconfig.diff.models import LineDiffResult
from pubconfig.notices import Notifier
from pubconfig.store.base import ConfigStore, parse_version

logger = logging.getLogger(__name__)

CURRENT_BASELINE = "current"


class BaselineSupersededError(RuntimeError):
    """Raised when a baseline switch lost to a newer switch request."""


def parse_baseline_choice(raw: Any) -> str | int:
    if raw is None:
        return CURRENT_BASELINE
    if isinstance(raw, str) and raw.strip().lower() in {"", CURRENT_BASELINE}:
        return CURRENT_BASELINE
    return parse_version(raw)


def baseline_label(choice: str | int) -> str:
    if choice == CURRENT_BASELINE:
        return "current saved"
    return f"version {choice}"


class CompareView:
    """Diffs the live document against a switchable baseline.

    Baseline switches are ordered by request: a fetch that completes after a
    newer switch was requested is discarded.
    """

    def __init__(
        self,
        store: ConfigStore,
        document_id: str,
        *,
        baseline: dict[str, Any],
        current: Callable[[], Any],
        notifier: Notifier | None = None,
    ) -> None:
        self.store = store
        self.document_id = document_id
        self._current = current
        self._notifier = notifier
        self._lock = threading.Lock()
        self._generation = 0
        self._baseline = clone_value(baseline)
        self._choice: str | int = CURRENT_BASELINE

    @property
    def choice(self) -> str | int:
        return self._choice

    @property
    def baseline(self) -> dict[str, Any]:
        with self._lock:
            return clone_value(self._baseline)

    def available_versions(self) -> list[int]:
        """Historical versions, excluding the newest which equals the saved document."""
        versions = self._call(lambda: self.store.list_versions(self.document_id))
        return list(versions[1:])

    def select_baseline(self, raw_choice: Any) -> bool:
        """Fetch and install a new baseline; False if a newer request superseded it."""
        choice = parse_baseline_choice(raw_choice)
        with self._lock:
            self._generation += 1
            ticket = self._generation

        if choice == CURRENT_BASELINE:
            document = self._call(lambda: self.store.load(self.document_id))
        else:
            document = self._call(lambda: self.store.load_version(self.document_id, int(choice)))

        with self._lock:
            if ticket != self._generation:
                logger.info(
                    "Dropping stale baseline %s for %s",
                    baseline_label(choice),
                    self.document_id,
                )
                return False
            self._baseline = document
            self._choice = choice
        return True

    def diff(self) -> LineDiffResult:
        with self._lock:
            baseline = self._baseline
            choice = self._choice
        return diff_documents(
            baseline,
            self._current(),
            baseline_label=baseline_label(choice),
            current_label="current edits",
        )

    def _call(self, operation: Callable[[], Any]) -> Any:
        if self._notifier is None:
            return operation()
        return self._notifier.with_loading(operation)
