"""Diff subsystem for pubconfig."""

from pubconfig.diff.compare import (
    CURRENT_BASELINE,
    BaselineSupersededError,
    CompareView,
    parse_baseline_choice,
)
from pubconfig.diff.engine import diff_documents, diff_text, split_lines
from pubconfig.diff.formatting import render_diff_html, render_diff_summary, render_diff_text
from pubconfig.diff.models import DiffKind, DiffLine, LineDiffResult

__all__ = [
    "DiffKind",
    "DiffLine",
    "LineDiffResult",
    "diff_text",
    "diff_documents",
    "split_lines",
    "render_diff_summary",
    "render_diff_text",
    "render_diff_html",
    "CURRENT_BASELINE",
    "BaselineSupersededError",
    "CompareView",
    "parse_baseline_choice",
]
