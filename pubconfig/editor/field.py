"""Recursive entry point: label, collapse state and remove affordance for one value."""

from __future__ import annotations

from typing import Any, Callable

from pubconfig.core.classify import classify_value
from pubconfig.core.types import DocumentPath
from pubconfig.editor.base import Editor, create_value_editor
from pubconfig.editor.exceptions import ValidationError
from pubconfig.editor.model import DocumentModel
from pubconfig.editor.widgets import Widget


class FieldController(Editor):
    """Wraps exactly one value editor for the key or index at ``path``.

    Non-boolean fields start collapsed. Collapse state is private to each
    instance.
    """

    kind = "field"
    actions = frozenset({"toggle", "remove"})

    def __init__(
        self,
        document: DocumentModel,
        path: DocumentPath,
        *,
        fixed_structure: bool = False,
        on_remove: Callable[[], Any] | None = None,
    ) -> None:
        super().__init__(document, path)
        if not self.path:
            raise ValueError("field path must address a key or index")
        self.label = str(self.path[-1])
        self.fixed_structure = fixed_structure
        self.field_kind = classify_value(self.value)
        self._on_remove = on_remove
        self.collapsed = self.collapsible
        create_value_editor(document, self.path, fixed_structure=fixed_structure).mount(self)

    @property
    def collapsible(self) -> bool:
        return self.field_kind != "boolean"

    @property
    def removable(self) -> bool:
        return self._on_remove is not None

    @property
    def editor(self) -> Editor:
        return self.children[0]

    def toggle(self) -> bool:
        if self.collapsible:
            self.collapsed = not self.collapsed
        return self.collapsed

    def remove(self) -> Any:
        if self._on_remove is None:
            raise ValidationError(f"Field {self.label!r} cannot be removed")
        return self._on_remove()

    def handle(self, action: str, payload: dict[str, Any]) -> Any:
        if action == "toggle":
            return self.toggle()
        if action == "remove":
            return self.remove()
        return super().handle(action, payload)

    def render(self) -> Widget:
        return Widget(
            kind="field",
            path=self.path,
            label=self.label,
            attrs={
                "field_kind": self.field_kind,
                "collapsible": self.collapsible,
                "collapsed": self.collapsed,
                "removable": self.removable,
            },
            children=[self.editor.render()],
        )
