"""Utility helpers for formatting and exporting results."""

from netdash.utility.format_table import build_table, export_csv, export_json, format_table

__all__ = [
    'build_table',
    'export_csv',
    'export_json',
    'format_table',
]
