# -*- coding: utf-8 -*-
from __future__ import annotations

import html
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from texporter.config import SUMMARY_LIMIT
from texporter.core.scene import is_live
from texporter.core.settings import ExportSettings
from texporter.models import ExportedFile, Issue

TRUNCATION_MARKER = "...and more"
SELECT_HINT = "Click 'Select Error' to highlight the first error in hierarchy."


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _esc(s: Any) -> str:
    return html.escape("" if s is None else str(s))


def _section(title: str, items: List[Issue], limit: int) -> str:
    lines = [f"{title} ({len(items)}):"]
    lines.extend(f"{n}. {issue}" for n, issue in enumerate(items[:limit], start=1))
    if len(items) > limit:
        lines.append(TRUNCATION_MARKER)
    return "\n".join(lines)


def build_summary_text(issues: List[Issue], limit: int = SUMMARY_LIMIT) -> str:
    """
    End-of-run summary: errors first, then warnings, each capped at ``limit``
    entries with a truncation marker.
    """
    errors = [i for i in issues if i.is_error]
    warnings = [i for i in issues if not i.is_error]

    sections = []
    if errors:
        sections.append(_section("Errors", errors, limit))
    if warnings:
        sections.append(_section("Warnings", warnings, limit))
    if errors:
        sections.append(SELECT_HINT)
    return "\n\n".join(sections)


def first_selectable_error(issues: List[Issue]) -> Optional[Issue]:
    for issue in issues:
        if issue.is_error and is_live(issue.target):
            return issue
    return None


def build_report_html(
    tool_name: str,
    tool_version: str,
    project_root: str,
    settings: ExportSettings,
    issues: List[Issue],
    exported: List[ExportedFile],
    processed_renderers: int,
    total_materials: int,
) -> str:
    errors = [i for i in issues if i.is_error]
    warnings = [i for i in issues if not i.is_error]

    css = """
    body { font-family: sans-serif; margin: 20px; color: #222; }
    section { margin: 16px 0; }
    dl.run { display: grid; grid-template-columns: max-content auto; gap: 4px 16px; }
    dl.run dt { color: #666; }
    table { border-collapse: collapse; width: 100%; }
    th, td { border-bottom: 1px solid #e4e4e4; padding: 4px 8px; text-align: left; font-size: 13px; }
    tr.err td:first-child { color: #a00000; font-weight: bold; }
    tr.warn td:first-child { color: #8a6100; font-weight: bold; }
    .muted { color: #777; font-size: 12px; }
    """

    def render_issues(label: str, items: List[Issue]) -> str:
        if not items:
            return f"<p class='muted'>No {label.lower()}.</p>"
        css_class = "err" if label == "Errors" else "warn"
        rows = "".join(
            f"<tr class='{css_class}'><td>{_esc(i.level)}</td><td><code>{_esc(i.code)}</code></td>"
            f"<td>{_esc(i.object_name)}</td><td>{_esc(i.material_name)}</td><td>{_esc(i.message)}</td></tr>"
            for i in items
        )
        return (
            "<table><tr><th>Level</th><th>Code</th><th>Object</th><th>Material</th><th>Message</th></tr>"
            f"{rows}</table>"
        )

    file_rows = "".join(
        f"<tr><td>{_esc(f.material_name)}</td><td><code>{_esc(f.slot)}</code></td>"
        f"<td>{_esc(f.src)}</td><td>{_esc(f.dst)}</td></tr>"
        for f in exported
    ) or '<tr><td colspan="4" class="muted">No files exported.</td></tr>'

    return f"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <title>{_esc(tool_name)} Report</title>
  <style>{css}</style>
</head>
<body>
  <h1>{_esc(tool_name)} - Export Report</h1>
  <p class="muted">Generated {_esc(_utc_now())} (UTC) - Tool version {_esc(tool_version)}</p>

  <section>
    <dl class="run">
      <dt>Project root</dt><dd><code>{_esc(project_root)}</code></dd>
      <dt>Output directory</dt><dd><code>{_esc(settings.output_directory)}</code></dd>
      <dt>Opaque below render queue</dt><dd>{_esc(settings.render_queue_threshold)}</dd>
      <dt>Renderers</dt><dd>{processed_renderers}</dd>
      <dt>Materials</dt><dd>{total_materials}</dd>
      <dt>Exported files</dt><dd>{len(exported)}</dd>
    </dl>
  </section>

  <section>
    <h2>Issues</h2>
    <p class="muted">{len(errors)} error(s), {len(warnings)} warning(s)</p>
    <h3>Errors</h3>
    {render_issues("Errors", errors)}
    <h3>Warnings</h3>
    {render_issues("Warnings", warnings)}
  </section>

  <section>
    <h2>Exported Textures</h2>
    <table>
      <tr><th>Material</th><th>Slot</th><th>Source</th><th>Destination</th></tr>
      {file_rows}
    </table>
  </section>
</body>
</html>
"""


def write_report_html(html_text: str, report_path: str) -> str:
    p = Path(report_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(html_text, encoding="utf-8")
    return str(p)
