"""Presentation layer for CLI output formatting.

Components:
- process_table: status and info tables, JSON output
- colors: color palette and styling helpers
"""

from pmctl.core.presentation.process_table import (
    format_detail_json,
    format_detail_table,
    format_memory,
    format_status_json,
    format_status_table,
)

__all__ = [
    "format_status_table",
    "format_detail_table",
    "format_status_json",
    "format_detail_json",
    "format_memory",
]
