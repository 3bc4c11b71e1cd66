"""Top-level editor splitting the document into required and optional fields."""

from __future__ import annotations

from typing import Any, Iterable

from pubconfig.config import DEFAULT_REQUIRED_FIELDS
from pubconfig.editor.exceptions import ValidationError
from pubconfig.editor.model import DocumentModel
from pubconfig.editor.object import ObjectEditor, add_field_widget
from pubconfig.editor.widgets import Widget


class DocumentEditor(ObjectEditor):
    """Required fields render with a fixed structure and no remove control.

    Optional fields are every other key and carry full add/remove capability.
    """

    kind = "document"
    add_placeholder = "Enter new field name"

    def __init__(
        self,
        document: DocumentModel,
        *,
        required_fields: Iterable[str] = DEFAULT_REQUIRED_FIELDS,
    ) -> None:
        self.required_fields: tuple[str, ...] = tuple(required_fields)
        super().__init__(document, (), fixed_structure=False)

    def required_keys(self) -> list[str]:
        present = self.value
        return [key for key in self.required_fields if key in present]

    def optional_keys(self) -> list[str]:
        return [key for key in self.value if key not in self.required_fields]

    def _build_fields(self) -> None:
        self.destroy_children()
        for key in self.required_keys():
            self._mount_field(key, fixed_structure=True, removable=False)
        for key in self.optional_keys():
            self._mount_field(key, fixed_structure=False, removable=True)

    def validate_new_key(self, raw_key: str) -> str:
        key = super().validate_new_key(raw_key)
        if key in self.required_fields:
            raise ValidationError("Cannot add a required field manually")
        return key

    def remove_field(self, key: str) -> Any:
        if key in self.required_fields:
            raise ValidationError("Required fields cannot be removed")
        return super().remove_field(key)

    def render(self) -> Widget:
        required_rows: list[Widget] = []
        optional_rows: list[Widget] = []
        for child in self.children:
            target = required_rows if child.path[-1] in self.required_fields else optional_rows
            target.append(child.render())
        optional_rows.append(add_field_widget(self.path, self.add_placeholder))
        return Widget(
            kind="document",
            path=self.path,
            children=[
                Widget(
                    kind="section",
                    attrs={"name": "required", "title": "Required Fields"},
                    children=required_rows,
                ),
                Widget(
                    kind="section",
                    attrs={"name": "optional", "title": "Optional Fields"},
                    children=optional_rows,
                ),
            ],
        )
