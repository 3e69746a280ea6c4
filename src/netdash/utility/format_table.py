"""Table formatting and export for result records."""

import csv
import io
import json
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table
from typing import Any
from netdash.utils.errors import ToolError


Record = dict[str, Any] | BaseModel


def to_rows(records: list[Record]) -> list[dict[str, Any]]:
    """Plain JSON-compatible dicts for a list of models or dicts."""
    rows = []
    for record in records:
        if isinstance(record, BaseModel):
            rows.append(record.model_dump(mode='json'))
        elif isinstance(record, dict):
            rows.append(record)
        else:
            raise ToolError(
                message=f'Cannot format record of type {type(record).__name__}',
                error_code='INVALID_DATA',
                suggestion='Pass pydantic models or dictionaries',
            )
    return rows


def _columns(rows: list[dict[str, Any]], columns: list[str] | None) -> list[str]:
    if columns is not None:
        return columns
    # First-seen order across all rows
    seen: dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return 'yes' if value else 'no'
    if isinstance(value, (list, dict)):
        text = ', '.join(map(str, value)) if isinstance(value, list) else json.dumps(value)
        return text[:60] + '...' if len(text) > 60 else text
    if value is None:
        return '-'
    return str(value)


def build_table(
    records: list[Record],
    columns: list[str] | None = None,
    title: str | None = None,
) -> Table:
    """Rich table over ``records`` (all columns unless ``columns`` is given)."""
    rows = to_rows(records)
    columns = _columns(rows, columns)

    table = Table(title=title, show_header=True, header_style='bold magenta')
    for col in columns:
        table.add_column(col.replace('_', ' ').title(), style='cyan', no_wrap=False)

    for row in rows:
        table.add_row(*(_cell(row.get(col)) for col in columns))

    return table


def format_table(
    records: list[Record],
    columns: list[str] | None = None,
    title: str | None = None,
) -> str:
    """Render records as a rich table and return the text."""
    if not records:
        return 'No data to display'

    console = Console(width=120, legacy_windows=False)
    with console.capture() as capture:
        console.print(build_table(records, columns, title))
    return capture.get()


def export_csv(records: list[Record], columns: list[str] | None = None) -> str:
    """CSV text with a header row; nested values are flattened to strings."""
    rows = to_rows(records)
    columns = _columns(rows, columns)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(columns)
    for row in rows:
        writer.writerow([
            '; '.join(map(str, v)) if isinstance(v, list) else ('' if v is None else v)
            for v in (row.get(col) for col in columns)
        ])
    return buffer.getvalue()


def export_json(records: list[Record] | Record) -> str:
    """Pretty-printed JSON for one record or a list of them."""
    if isinstance(records, list):
        return json.dumps(to_rows(records), indent=2)
    return json.dumps(to_rows([records])[0], indent=2)
