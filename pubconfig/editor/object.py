"""Field-bag editor with optional key add/remove."""

from __future__ import annotations

from functools import partial
from typing import Any

from pubconfig.core.types import DocumentPath, FieldType, default_for_field_type
from pubconfig.editor.base import Editor, register_editor
from pubconfig.editor.exceptions import ValidationError
from pubconfig.editor.field import FieldController
from pubconfig.editor.model import DocumentModel
from pubconfig.editor.widgets import Widget

ADD_FIELD_TYPES: tuple[dict[str, str], ...] = (
    {"label": "String", "value": FieldType.STRING.value},
    {"label": "Number", "value": FieldType.NUMBER.value},
    {"label": "Boolean", "value": FieldType.BOOLEAN.value},
    {"label": "Array", "value": FieldType.ARRAY.value},
    {"label": "Object", "value": FieldType.OBJECT.value},
)


def add_field_widget(path: DocumentPath, placeholder: str) -> Widget:
    return Widget(
        kind="add_field",
        path=path,
        attrs={"placeholder": placeholder, "types": [dict(item) for item in ADD_FIELD_TYPES]},
    )


@register_editor("object")
class ObjectEditor(Editor):
    kind = "object"
    actions = frozenset({"add_field", "remove_field"})
    add_placeholder = "New property name"

    def __init__(
        self,
        document: DocumentModel,
        path: DocumentPath,
        *,
        fixed_structure: bool = False,
    ) -> None:
        super().__init__(document, path)
        self._fixed_structure = fixed_structure
        self._build_fields()

    @property
    def fixed_structure(self) -> bool:
        return self._fixed_structure

    def keys(self) -> list[str]:
        return list(self.value.keys())

    def _build_fields(self) -> None:
        self.destroy_children()
        for key in self.keys():
            self._mount_field(key, fixed_structure=self._fixed_structure, removable=not self._fixed_structure)

    def _mount_field(self, key: str, *, fixed_structure: bool, removable: bool) -> FieldController:
        field = FieldController(
            self.document,
            self.path + (key,),
            fixed_structure=fixed_structure,
            on_remove=partial(self.remove_field, key) if removable else None,
        )
        field.mount(self)
        return field

    def validate_new_key(self, raw_key: str) -> str:
        if self._fixed_structure:
            raise ValidationError("Fields cannot be added to a fixed-structure object")
        key = (raw_key or "").strip()
        if not key:
            raise ValidationError("Field name cannot be empty")
        if key in self.value:
            raise ValidationError("Field already exists")
        return key

    def add_field(self, raw_key: str, field_type: str | FieldType = FieldType.STRING) -> Any:
        key = self.validate_new_key(raw_key)
        try:
            initial_value = default_for_field_type(field_type)
        except ValueError as error:
            raise ValidationError(str(error)) from error
        self.document.set(self.path + (key,), initial_value)
        self._build_fields()
        return initial_value

    def remove_field(self, key: str) -> Any:
        if self._fixed_structure:
            raise ValidationError("Fields cannot be removed from a fixed-structure object")
        if key not in self.value:
            raise ValidationError(f"Field {key!r} does not exist")
        removed = self.document.delete(self.path + (key,))
        self._build_fields()
        return removed

    def handle(self, action: str, payload: dict[str, Any]) -> Any:
        if action == "add_field":
            return self.add_field(
                str(payload.get("key") or ""),
                payload.get("field_type") or FieldType.STRING,
            )
        if action == "remove_field":
            return self.remove_field(str(payload.get("key") or ""))
        return super().handle(action, payload)

    def render(self) -> Widget:
        children = [child.render() for child in self.children]
        if not self._fixed_structure:
            children.append(add_field_widget(self.path, self.add_placeholder))
        return Widget(
            kind="object",
            path=self.path,
            attrs={"fixed_structure": self._fixed_structure},
            children=children,
        )
