import uuid
from collections.abc import Iterator
from types import TracebackType
from typing import TYPE_CHECKING, Any, Mapping, Self, Sequence

import pyarrow as pa

from ..codec import RowConverter
from ..errors import CodecError, InterfaceError
from ..helper import report_name
from .rowtype import ColumnInfo, ResultMetadata, describe_as_result_metadata, describe_as_rowtype
from .statement import Statement

if TYPE_CHECKING:
    import pandas as pd

    from .connection import Connection


def _scalar(value: Any) -> Any:
    # Typed values expose their number as .value; plain strings pass through.
    return getattr(value, "value", value)


class Cursor:
    def __init__(self, connection: "Connection") -> None:
        self._connection = connection
        self._is_closed = False
        self._statement: Statement | None = None
        self._last_query: str | None = None
        self._table: pa.Table | None = None
        self._fetch_index: int = 0
        # Row indexes already reported as undecodable.
        self._bad_rows: set[int] = set()
        self._converter: RowConverter | None = None
        self._rowcount: int = -1
        self._qid: str | None = None
        self.arraysize: int = 1

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        while True:
            row = self.fetchone()
            if row is None:
                return
            yield row

    @property
    def connection(self) -> "Connection":
        return self._connection

    def _check_open(self) -> None:
        if self._is_closed:
            raise InterfaceError("Cursor is closed", errno=250002, sqlstate="08003")
        self._connection._check_open()

    def execute(
        self,
        command: str | Statement,
        params: Sequence[Any] | Mapping[str, Any] | None = None,
        *args: Any,
        **kwargs: Any,
    ) -> Self:
        """
        Runs an AWQL query, or a prepared statement, and opens its result set.

        Raises:
            EmptyStatement: ``command`` is an empty string.
        """
        self._check_open()
        statement = command if isinstance(command, Statement) else self._connection.prepare(command)

        self._table = None
        self._fetch_index = 0
        self._bad_rows = set()
        self._converter = None
        self._rowcount = -1
        self._qid = None

        table = statement.fetch(params)

        self._statement = statement
        self._last_query = statement.resolve(params)
        self._table = table
        self._converter = RowConverter(table.column_names, self._connection.column_types)
        self._rowcount = table.num_rows
        self._qid = str(uuid.uuid4())
        return self

    def executemany(
        self,
        command: str | Statement,
        seq_of_params: Sequence[Sequence[Any] | Mapping[str, Any]],
    ) -> Self:
        """Runs the query once per parameter set; the last result stays open."""
        statement = command if isinstance(command, Statement) else self._connection.prepare(command)
        for params in seq_of_params:
            self.execute(statement, params)
        return self

    def _require_result(self) -> pa.Table:
        self._check_open()
        if self._table is None:
            raise InterfaceError("No open result set", errno=250004, sqlstate="24000")
        return self._table

    def fetchone(self) -> tuple[Any, ...] | None:
        result = self.fetchmany(1)
        return result[0] if result else None

    def fetchmany(self, size: int | None = None) -> list[tuple[Any, ...]]:
        """
        Fetch the next rows, decoded.

        A row that cannot be decoded raises :class:`CodecError` and nothing
        is consumed by that call except the bad row itself: the next fetch
        starts from the same position and skips it.
        """
        table = self._require_result()
        if size is None:
            size = self.arraysize

        rows: list[tuple[Any, ...]] = []
        index = self._fetch_index
        while len(rows) < size and index < table.num_rows:
            chunk = table.slice(offset=index, length=size - len(rows))
            for cells in zip(*(column.to_pylist() for column in chunk.columns)):
                if index not in self._bad_rows:
                    try:
                        rows.append(self._converter.convert(cells, index + 1))
                    except CodecError:
                        self._bad_rows.add(index)
                        raise
                index += 1
        self._fetch_index = index
        return rows

    def fetchall(self) -> list[tuple[Any, ...]]:
        table = self._require_result()
        return self.fetchmany(table.num_rows - self._fetch_index)

    def fetch_arrow_all(self) -> pa.Table:
        """Returns the remaining rows undecoded, as the service sent them."""
        table = self._require_result()
        remaining = table.slice(offset=self._fetch_index)
        self._fetch_index = table.num_rows
        return remaining

    def fetch_pandas_all(self, **kwargs: Any) -> "pd.DataFrame":
        """
        Fetch all remaining rows as a pandas DataFrame.

        Typed cells are reduced to their value, so sentinels become None.
        """
        import pandas as pd

        table = self._require_result()
        rows = self.fetchall()
        return pd.DataFrame(
            [[_scalar(v) for v in row] for row in rows],
            columns=table.column_names,
        )

    @property
    def description(self) -> list[ResultMetadata] | None:
        if self._table is None or self._converter is None:
            return None
        return describe_as_result_metadata(self._table.column_names, self._converter.kinds)

    def describe_columns(self) -> list[ColumnInfo]:
        table = self._require_result()
        return describe_as_rowtype(
            table.column_names,
            self._converter.kinds,
            account=self._connection.adwords_id,
            report=report_name(self._last_query or ""),
        )

    def setinputsizes(self, sizes: Any) -> None:
        pass

    def setoutputsize(self, size: Any, column: Any = None) -> None:
        pass

    def is_closed(self) -> bool:
        return self._is_closed

    def close(self) -> bool:
        if self._is_closed:
            return False
        self._table = None
        self._converter = None
        self._statement = None
        self._is_closed = True
        return True

    @property
    def rowcount(self) -> int:
        return self._rowcount

    @property
    def qid(self) -> str | None:
        return self._qid

    @property
    def query(self) -> str | None:
        return self._last_query
