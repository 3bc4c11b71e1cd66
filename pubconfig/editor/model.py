"""Path-addressed document model shared by every editor."""

from __future__ import annotations

from typing import Any, Callable

from pubconfig.core.paths import delete_at_path, get_at_path, set_at_path
from pubconfig.core.types import DocumentPath

ChangeListener = Callable[[DocumentPath], None]


class DocumentModel:
    """Owns the root mapping; editors read and write it by path."""

    def __init__(self, root: dict[str, Any]) -> None:
        if not isinstance(root, dict):
            raise TypeError("document root must be a mapping")
        self._root = root
        self._listeners: list[ChangeListener] = []
        self.revision = 0

    @property
    def root(self) -> dict[str, Any]:
        return self._root

    def get(self, path: DocumentPath = ()) -> Any:
        return get_at_path(self._root, path)

    def set(self, path: DocumentPath, value: Any) -> None:
        set_at_path(self._root, path, value)
        self._changed(path)

    def delete(self, path: DocumentPath) -> Any:
        removed = delete_at_path(self._root, path)
        self._changed(path)
        return removed

    def append(self, path: DocumentPath, value: Any) -> int:
        container = self.get(path)
        if not isinstance(container, list):
            raise TypeError("append target must be an array")
        container.append(value)
        self._changed(path)
        return len(container) - 1

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self, path: DocumentPath) -> None:
        self.revision += 1
        for listener in list(self._listeners):
            listener(path)
