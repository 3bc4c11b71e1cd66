"""Text/number input editor for scalar values."""

from __future__ import annotations

import math
import re
from typing import Any

from pubconfig.core.classify import is_numeric
from pubconfig.core.types import DocumentPath
from pubconfig.editor.base import Editor, register_editor
from pubconfig.editor.model import DocumentModel
from pubconfig.editor.widgets import Widget

_INTEGER_RE = re.compile(r"^[+-]?[0-9]+$")
_FLOAT_RE = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")


def parse_number(raw: str) -> int | float:
    """Convert input text to a number; unparseable text yields NaN."""
    text = raw.strip()
    if not text:
        return 0
    if _INTEGER_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    lowered = text.lstrip("+-").lower()
    if lowered == "infinity":
        return float("-inf") if text.startswith("-") else float("inf")
    return float("nan")


def format_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    return str(value)


@register_editor("primitive")
class PrimitiveEditor(Editor):
    """Input mode is fixed at construction so edits never change the value's type."""

    kind = "primitive"
    actions = frozenset({"input"})

    def __init__(
        self,
        document: DocumentModel,
        path: DocumentPath,
        *,
        fixed_structure: bool = False,
    ) -> None:
        super().__init__(document, path)
        self.numeric = is_numeric(self.value)

    @property
    def input_type(self) -> str:
        return "number" if self.numeric else "text"

    def on_input(self, raw: str) -> Any:
        value: Any = parse_number(raw) if self.numeric else raw
        self.document.set(self.path, value)
        return value

    def handle(self, action: str, payload: dict[str, Any]) -> Any:
        if action != "input":
            return super().handle(action, payload)
        raw = payload.get("value")
        return self.on_input("" if raw is None else str(raw))

    def render(self) -> Widget:
        return Widget(
            kind="primitive",
            path=self.path,
            value=format_scalar(self.value),
            attrs={"input_type": self.input_type},
        )
