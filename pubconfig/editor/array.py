"""Ordered list editor with item add/remove."""

from __future__ import annotations

from typing import Any

from pubconfig.core.types import DocumentPath
from pubconfig.editor.base import Editor, create_value_editor, register_editor
from pubconfig.editor.exceptions import ValidationError
from pubconfig.editor.model import DocumentModel
from pubconfig.editor.template import item_template
from pubconfig.editor.widgets import Widget


@register_editor("array")
class ArrayEditor(Editor):
    """Items can always be added or removed; the shape of object items is locked."""

    kind = "array"
    actions = frozenset({"add_item", "remove_item"})

    def __init__(
        self,
        document: DocumentModel,
        path: DocumentPath,
        *,
        fixed_structure: bool = False,
    ) -> None:
        super().__init__(document, path)
        self.fixed_structure = fixed_structure
        self._build_items()

    def __len__(self) -> int:
        return len(self.value)

    def _build_items(self) -> None:
        self.destroy_children()
        for index in range(len(self.value)):
            create_value_editor(
                self.document,
                self.path + (index,),
                fixed_structure=True,
            ).mount(self)

    def remove_item(self, index: int) -> Any:
        length = len(self.value)
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < length:
            raise ValidationError(f"Item index {index!r} is out of range for {length} item(s)")
        removed = self.document.delete(self.path + (index,))
        self._build_items()
        return removed

    def add_item(self) -> Any:
        new_item = item_template(self.value)
        self.document.append(self.path, new_item)
        self._build_items()
        return new_item

    def handle(self, action: str, payload: dict[str, Any]) -> Any:
        if action == "add_item":
            return self.add_item()
        if action == "remove_item":
            raw_index = payload.get("index")
            try:
                index = int(raw_index)
            except (TypeError, ValueError) as error:
                raise ValidationError(f"Item index must be an integer, got {raw_index!r}") from error
            return self.remove_item(index)
        return super().handle(action, payload)

    def render(self) -> Widget:
        rows = [
            Widget(
                kind="array_item",
                path=child.path,
                attrs={"index": index},
                children=[child.render()],
            )
            for index, child in enumerate(self.children)
        ]
        return Widget(
            kind="array",
            path=self.path,
            attrs={"length": len(rows)},
            children=rows,
        )
