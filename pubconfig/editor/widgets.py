"""Render output of the editor tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from pubconfig.core.paths import format_path
from pubconfig.core.types import DocumentPath


@dataclass(slots=True)
class Widget:
    """A presentation-neutral description of one rendered control."""

    kind: str
    path: DocumentPath = ()
    label: str | None = None
    value: Any = None
    attrs: dict[str, Any] = field(default_factory=dict)
    children: list["Widget"] = field(default_factory=list)

    @property
    def pointer(self) -> str:
        return format_path(self.path)

    def walk(self) -> Iterator["Widget"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, kind: str, path: DocumentPath | None = None) -> "Widget | None":
        for widget in self.walk():
            if widget.kind == kind and (path is None or widget.path == tuple(path)):
                return widget
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "path": list(self.path),
            "label": self.label,
            "value": self.value,
            "attrs": dict(self.attrs),
            "children": [child.to_dict() for child in self.children],
        }
