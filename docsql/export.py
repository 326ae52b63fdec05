"""CSV export of query results."""

import json
from datetime import date
from typing import Any, Optional

from docsql.core.models import QueryResult


def _csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        text = json.dumps(value, separators=(",", ":"), default=str).replace('"', '""')
        return f'"{text}"'
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    text = text.replace('"', '""')
    if any(ch in text for ch in '",\n'):
        return f'"{text}"'
    return text


def result_to_csv(result: QueryResult) -> str:
    """
    Render the result's columns and rows as CSV.

    Nested values are JSON-encoded and always quoted. Returns an empty string
    when there are no rows.
    """
    if not result.rows:
        return ""

    lines = [",".join(result.columns)]
    for row in result.rows:
        lines.append(",".join(_csv_cell(row.get(column)) for column in result.columns))
    return "\n".join(lines)


def export_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"query_results_{day.isoformat()}.csv"
