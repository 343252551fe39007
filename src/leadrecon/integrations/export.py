"""CSV export helpers."""

import csv
import io
from typing import Any, Iterable, Mapping, Optional, Sequence


def to_csv(rows: Iterable[Mapping[str, Any]], columns: Optional[Sequence[str]] = None) -> bytes:
    """Serialize mappings to UTF-8 CSV bytes.

    Columns default to the keys of the first row. Missing values are written
    as empty cells; an empty input yields an empty payload.
    """
    rows = list(rows)
    if not rows:
        return b""
    fieldnames = list(columns or rows[0].keys())

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=fieldnames, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({key: "" if row.get(key) is None else row.get(key) for key in fieldnames})
    return buffer.getvalue().encode("utf-8")
