"""Polymorphic editor base and the value-kind editor registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Iterator

from pubconfig.core.classify import classify_value
from pubconfig.core.paths import format_path
from pubconfig.core.types import DocumentPath, FieldKind
from pubconfig.editor.exceptions import EditorError, ValidationError
from pubconfig.editor.model import DocumentModel
from pubconfig.editor.widgets import Widget

EditorFactory = Callable[..., "Editor"]
_EDITOR_REGISTRY: dict[str, EditorFactory] = {}


class Editor(ABC):
    """A node in the editor tree bound to one path of the document.

    Editors never hold references into the document; every read and write
    goes through ``document`` with ``path``.
    """

    kind: ClassVar[str] = "editor"
    actions: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, document: DocumentModel, path: DocumentPath) -> None:
        self.document = document
        self.path: DocumentPath = tuple(path)
        self.parent: Editor | None = None
        self.children: list[Editor] = []
        self.mounted = False

    @property
    def value(self) -> Any:
        return self.document.get(self.path)

    @abstractmethod
    def render(self) -> Widget:
        """Describe the current state of this editor and its children."""

    def handle(self, action: str, payload: dict[str, Any]) -> Any:
        raise ValidationError(f"Unsupported action {action!r} for {self.kind} editor")

    def mount(self, parent: "Editor | None" = None) -> "Editor":
        if parent is not None:
            parent.children.append(self)
            self.parent = parent
        self.mounted = True
        return self

    def destroy(self) -> None:
        for child in list(self.children):
            child.destroy()
        if self.parent is not None and self in self.parent.children:
            self.parent.children.remove(self)
        self.parent = None
        self.mounted = False

    def destroy_children(self) -> None:
        for child in list(self.children):
            child.destroy()

    def iter_tree(self) -> Iterator["Editor"]:
        yield self
        for child in self.children:
            yield from child.iter_tree()

    def find(self, path: DocumentPath, action: str | None = None) -> "Editor | None":
        target = tuple(path)
        for editor in self.iter_tree():
            if editor.path != target:
                continue
            if action is None or action in editor.actions:
                return editor
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={format_path(self.path)!r})"


def register_editor(kind: FieldKind) -> Callable[[type[Editor]], type[Editor]]:
    def decorator(editor_cls: type[Editor]) -> type[Editor]:
        if kind in _EDITOR_REGISTRY:
            raise EditorError(f"Editor for kind '{kind}' is already registered.")
        _EDITOR_REGISTRY[kind] = editor_cls
        return editor_cls

    return decorator


def create_value_editor(
    document: DocumentModel,
    path: DocumentPath,
    *,
    fixed_structure: bool = False,
) -> Editor:
    """Mount-ready editor for the value at ``path``, chosen by its classification."""
    kind = classify_value(document.get(path))
    factory = _EDITOR_REGISTRY.get(kind)
    if factory is None:
        raise EditorError(f"No editor registered for kind '{kind}'.")
    return factory(document, path, fixed_structure=fixed_structure)


def registered_editor_kinds() -> list[str]:
    return sorted(_EDITOR_REGISTRY)
