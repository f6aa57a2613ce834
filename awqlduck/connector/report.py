import csv
import io
from typing import Sequence

import pyarrow as pa

from ..errors import DataError


def parse_report(body: str, columns: Sequence[str] | None = None) -> pa.Table:
    """
    Parses a CSV report body into a table of string columns.

    Cells are kept as the service sent them; decoding happens when rows are
    fetched.

    Args:
        body: The CSV report, without report header or summary rows.
        columns: Column names when the body has no header row. When None the
            first row is the header.

    Raises:
        DataError: A row does not have one cell per column.
    """
    rows = [row for row in csv.reader(io.StringIO(body)) if row]

    if columns is None:
        if not rows:
            return pa.table({})
        names, rows = rows[0], rows[1:]
    else:
        names = list(columns)

    for number, row in enumerate(rows, start=1):
        if len(row) != len(names):
            raise DataError(
                f"report row {number} has {len(row)} cells, expected {len(names)}"
            )

    arrays = [
        pa.array([row[i] for row in rows], type=pa.string())
        for i in range(len(names))
    ]
    return pa.Table.from_arrays(arrays, names=names)
