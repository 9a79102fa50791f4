"""CSV export of leaderboards."""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence

from pydantic import BaseModel


def leaderboard_to_csv(entries: Sequence[BaseModel]) -> str:
    """Render leaderboard entries as CSV: a plain header row, then every value quoted.

    Columns follow the entry model's field order. An empty board yields an
    empty string.
    """
    if not entries:
        return ""
    columns = list(type(entries[0]).model_fields)
    buffer = io.StringIO()
    buffer.write(",".join(columns) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for entry in entries:
        row = entry.model_dump()
        writer.writerow([row[column] for column in columns])
    return buffer.getvalue()
