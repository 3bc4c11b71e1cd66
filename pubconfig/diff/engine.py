"""Textual line diff over the serialized form of two documents."""

from __future__ import annotations

from difflib import SequenceMatcher
from typing import Any

from pubconfig.core.canonical import document_json
from pubconfig.diff.models import DiffLine, LineDiffResult


def split_lines(text: str) -> list[str]:
    if not text:
        return []
    return text.rstrip("\n").split("\n")


def diff_text(
    old_text: str,
    new_text: str,
    *,
    baseline_label: str = "baseline",
    current_label: str = "current",
) -> LineDiffResult:
    """Classify every line as added, removed or unchanged.

    Unchanged lines advance both counters; removed lines only the old one;
    added lines only the new one. Within a replaced block removals come first.
    """
    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)
    matcher = SequenceMatcher(None, old_lines, new_lines, autojunk=False)

    lines: list[DiffLine] = []
    old_number = 1
    new_number = 1

    for tag, old_start, old_end, new_start, new_end in matcher.get_opcodes():
        if tag == "equal":
            for content in old_lines[old_start:old_end]:
                lines.append(DiffLine("unchanged", content, old_number, new_number))
                old_number += 1
                new_number += 1
            continue

        if tag in {"delete", "replace"}:
            for content in old_lines[old_start:old_end]:
                lines.append(DiffLine("removed", content, old_number, None))
                old_number += 1

        if tag in {"insert", "replace"}:
            for content in new_lines[new_start:new_end]:
                lines.append(DiffLine("added", content, None, new_number))
                new_number += 1

    return LineDiffResult(
        lines=lines,
        baseline_label=baseline_label,
        current_label=current_label,
    )


def diff_documents(
    baseline: Any,
    current: Any,
    *,
    baseline_label: str = "baseline",
    current_label: str = "current",
) -> LineDiffResult:
    return diff_text(
        document_json(baseline),
        document_json(current),
        baseline_label=baseline_label,
        current_label=current_label,
    )
