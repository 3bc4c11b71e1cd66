"""Data models for line-level document diffs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

DiffKind = Literal["added", "removed", "unchanged"]

_PREFIXES: dict[str, str] = {
    "added": "+ ",
    "removed": "- ",
    "unchanged": "  ",
}


@dataclass(slots=True)
class DiffLine:
    """One serialized line with its classification and side line numbers."""

    kind: DiffKind
    content: str
    old_line: int | None
    new_line: int | None

    @property
    def prefix(self) -> str:
        return _PREFIXES[self.kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "prefix": self.prefix,
            "content": self.content,
            "old_line": self.old_line,
            "new_line": self.new_line,
        }


@dataclass(slots=True)
class LineDiffResult:
    """Sequential annotated lines for a baseline/current pair."""

    lines: list[DiffLine]
    baseline_label: str = "baseline"
    current_label: str = "current"

    @property
    def identical(self) -> bool:
        return all(line.kind == "unchanged" for line in self.lines)

    def summary(self) -> dict[str, int]:
        counts = {
            "added": 0,
            "removed": 0,
            "unchanged": 0,
        }
        for line in self.lines:
            counts[line.kind] += 1
        return counts

    def changed_lines(self) -> list[DiffLine]:
        return [line for line in self.lines if line.kind != "unchanged"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseline_label": self.baseline_label,
            "current_label": self.current_label,
            "identical": self.identical,
            "summary": self.summary(),
            "lines": [line.to_dict() for line in self.lines],
        }
