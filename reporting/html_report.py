#!/usr/bin/env python3

"""
HTML rendering for the suite report.

One self-contained page: header with system information, summary counts and
one card per test entry with its ordered log lines. Autoescaping is on, so
messages taken from the page under test are rendered as text.
"""

# === STANDARD LIBRARY IMPORTS ===
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

# === THIRD-PARTY IMPORTS ===
from jinja2 import Environment

if TYPE_CHECKING:
    from reporting.report_sink import ReportEntry, SystemInfo

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ document_title }}</title>
    <style>
        :root {
            --bg-primary: #1a1a2e;
            --bg-card: #16213e;
            --text-primary: #eee;
            --text-secondary: #aaa;
            --accent-green: #4ade80;
            --accent-red: #f87171;
            --accent-yellow: #fbbf24;
            --accent-blue: #60a5fa;
        }
        * { box-sizing: border-box; }
        body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; background: var(--bg-primary);
               color: var(--text-primary); margin: 0; padding: 20px; }
        .container { max-width: 1200px; margin: 0 auto; }
        table { border-collapse: collapse; width: 100%; }
        td, th { text-align: left; padding: 4px 8px; }
        .card { background: var(--bg-card); border-radius: 8px; padding: 12px 16px; margin: 12px 0; }
        .stats { display: flex; gap: 20px; }
        .stat-value { font-size: 1.5rem; font-weight: bold; }
        .stat-label, .meta, .time { color: var(--text-secondary); font-size: 0.85rem; }
        .pass { color: var(--accent-green); }
        .fail { color: var(--accent-red); }
        .skip, .warning { color: var(--accent-yellow); }
        .info { color: var(--accent-blue); }
    </style>
</head>
<body>
<div class="container">
    <h1>{{ report_name }}</h1>
    <p class="meta">Generated {{ generated_at }}</p>

    <div class="card">
        <table>
        {% for label, value in system_info %}
            <tr><th>{{ label }}</th><td>{{ value }}</td></tr>
        {% endfor %}
        </table>
    </div>

    {% if summary %}
    <div class="card stats">
        {% for label, value in summary %}
        <div><div class="stat-value">{{ value }}</div><div class="stat-label">{{ label }}</div></div>
        {% endfor %}
    </div>
    {% endif %}

    {% for entry in entries %}
    <div class="card">
        <h2 class="{{ entry.status.value }}">{{ entry.name }} [{{ entry.status.name }}]</h2>
        <p class="meta">{{ entry.description }} | Browser: {{ entry.browser or "n/a" }} | Thread: {{ entry.worker_id }}</p>
        <table>
        {% for line in entry.lines %}
            <tr>
                <td class="time">{{ line.timestamp.strftime("%H:%M:%S") }}</td>
                <td class="{{ line.severity.value }}">{{ line.severity.name }}</td>
                <td>{{ line.message }}</td>
            </tr>
        {% endfor %}
        </table>
    </div>
    {% endfor %}
</div>
</body>
</html>
"""

_environment = Environment(autoescape=True)
_template = _environment.from_string(HTML_TEMPLATE)

_SUMMARY_LABELS = (
    ("total", "Total Tests"),
    ("passed", "Passed"),
    ("failed", "Failed"),
    ("skipped", "Skipped"),
    ("passed_within_threshold", "Within Threshold"),
    ("pass_rate", "Pass Rate"),
)


def _summary_rows(summary: Optional[Mapping[str, Any]]) -> list[tuple[str, str]]:
    if not summary:
        return []
    rows = []
    for key, label in _SUMMARY_LABELS:
        if key not in summary:
            continue
        value = summary[key]
        rows.append((label, f"{value:.2f}%" if key == "pass_rate" else str(value)))
    return rows


def render_report(
    entries: Sequence["ReportEntry"],
    system_info: "SystemInfo",
    *,
    report_name: str,
    document_title: str,
    summary: Optional[Mapping[str, Any]] = None,
) -> str:
    """Render all entries into one HTML document."""
    return _template.render(
        entries=entries,
        system_info=system_info.as_pairs(),
        summary=_summary_rows(summary),
        report_name=report_name,
        document_title=document_title,
        generated_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    )
