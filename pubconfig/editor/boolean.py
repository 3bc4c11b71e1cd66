"""True/false radio-pair editor."""

from __future__ import annotations

from typing import Any

from pubconfig.core.types import DocumentPath
from pubconfig.editor.base import Editor, register_editor
from pubconfig.editor.exceptions import ValidationError
from pubconfig.editor.model import DocumentModel
from pubconfig.editor.widgets import Widget


def parse_choice(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    normalized = str(raw).strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ValidationError(f"Boolean choice must be true or false, got {raw!r}")


@register_editor("boolean")
class BooleanEditor(Editor):
    kind = "boolean"
    actions = frozenset({"select"})

    def __init__(
        self,
        document: DocumentModel,
        path: DocumentPath,
        *,
        fixed_structure: bool = False,
    ) -> None:
        super().__init__(document, path)

    def on_select(self, choice: bool) -> bool:
        """Write ``choice`` back; returns False when it was already selected."""
        if self.value is choice:
            return False
        self.document.set(self.path, choice)
        return True

    def handle(self, action: str, payload: dict[str, Any]) -> Any:
        if action != "select":
            return super().handle(action, payload)
        return self.on_select(parse_choice(payload.get("value")))

    def render(self) -> Widget:
        current = bool(self.value)
        return Widget(
            kind="boolean",
            path=self.path,
            value=current,
            attrs={
                "options": [
                    {"label": "True", "value": True, "checked": current},
                    {"label": "False", "value": False, "checked": not current},
                ],
            },
        )
