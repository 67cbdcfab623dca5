"""Tabular rendering of process snapshots and process details."""

import json
from collections.abc import Sequence

import click

from pmctl.core.presentation.colors import style_key, style_name, style_status
from pmctl.domain.entities import ProcessDetail, ProcessSet

STATUS_HEADER = ["name", "pid", "status", "uptime", "restart", "CPU·%", "memory"]
MEMORY_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_memory(memory_bytes: int) -> str:
    """Format a byte count with a binary unit, e.g. 1536 -> "1.5KB"."""
    value = float(max(memory_bytes, 0))
    unit = 0
    while value >= 1024.0 and unit < len(MEMORY_UNITS) - 1:
        value /= 1024.0
        unit += 1
    if unit == 0:
        return f"{int(value)}{MEMORY_UNITS[0]}"
    return f"{value:.1f}{MEMORY_UNITS[unit]}"


def render_table(
    rows: Sequence[Sequence[str]],
    header: Sequence[str] | None = None,
    center: bool = False,
) -> str:
    """Render rows as a bordered table with a line between rows.

    Cells may contain ANSI styling; widths are computed on the unstyled text.
    """
    all_rows = ([list(header)] if header else []) + [list(r) for r in rows]
    if not all_rows:
        return ""
    columns = max(len(r) for r in all_rows)
    widths = [0] * columns
    for row in all_rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(click.unstyle(cell)))

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def format_row(row: list[str]) -> str:
        cells = []
        for i in range(columns):
            cell = row[i] if i < len(row) else ""
            pad = widths[i] - len(click.unstyle(cell))
            if center:
                left = pad // 2
                cells.append(" " * left + cell + " " * (pad - left))
            else:
                cells.append(cell + " " * pad)
        return "| " + " | ".join(cells) + " |"

    lines = [separator]
    for row in all_rows:
        lines.append(format_row(row))
        lines.append(separator)
    return "\n".join(lines)


def format_status_table(snapshot: ProcessSet) -> str:
    rows = [
        [
            style_name(proc.name),
            str(proc.pid),
            style_status(proc.status),
            proc.uptime,
            str(proc.restarts),
            str(int(proc.cpu_percent)),
            format_memory(proc.memory_bytes),
        ]
        for proc in snapshot
    ]
    return render_table(rows, header=[h.upper() for h in STATUS_HEADER], center=True)


def format_detail_table(detail: ProcessDetail) -> str:
    return render_table([[style_key(k), v] for k, v in detail.items()])


def format_status_json(snapshot: ProcessSet) -> str:
    return json.dumps({"processes": [proc.to_dict() for proc in snapshot]}, indent=2)


def format_detail_json(detail: ProcessDetail) -> str:
    return json.dumps({"name": detail.name, "fields": detail.fields}, indent=2, sort_keys=True)
