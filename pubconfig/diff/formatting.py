"""Text and HTML rendering for line diffs."""

from __future__ import annotations

from html import escape

from pubconfig.diff.models import LineDiffResult


def render_diff_summary(diff: LineDiffResult) -> str:
    summary = diff.summary()
    return (
        f"baseline={diff.baseline_label} current={diff.current_label} "
        f"added={summary['added']} removed={summary['removed']} "
        f"unchanged={summary['unchanged']}"
    )


def render_diff_text(diff: LineDiffResult, *, changes_only: bool = False) -> str:
    if diff.identical and changes_only:
        return "no changes detected"

    width = max(
        [len(str(line.old_line or "")) for line in diff.lines]
        + [len(str(line.new_line or "")) for line in diff.lines]
        + [1]
    )
    rendered: list[str] = []
    for line in diff.lines:
        if changes_only and line.kind == "unchanged":
            continue
        old = str(line.old_line) if line.old_line is not None else ""
        new = str(line.new_line) if line.new_line is not None else ""
        rendered.append(f"{old:>{width}} {new:>{width}} {line.prefix}{line.content}")
    return "\n".join(rendered)


def render_diff_html(diff: LineDiffResult) -> str:
    rows: list[str] = []
    for line in diff.lines:
        old = "" if line.old_line is None else str(line.old_line)
        new = "" if line.new_line is None else str(line.new_line)
        rows.append(
            f'<div class="diff-line {line.kind}">'
            f'<div class="diff-line__number old">{old}</div>'
            f'<div class="diff-line__number new">{new}</div>'
            f'<div class="diff-line__prefix">{escape(line.prefix)}</div>'
            f'<div class="diff-line__content">{escape(line.content, quote=False)}</div>'
            "</div>"
        )
    return "\n".join(rows)
