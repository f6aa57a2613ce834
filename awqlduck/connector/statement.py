import logging
from typing import TYPE_CHECKING, Any, Mapping, Sequence

import pyarrow as pa

from ..cache import fingerprint
from ..errors import EmptyStatement, InterfaceError
from ..helper import bind_params, select_columns
from .report import parse_report

if TYPE_CHECKING:
    from .connection import Connection
    from .cursor import Cursor

logger = logging.getLogger(__name__)


class Statement:
    """A query prepared on a connection. It may be executed any number of times."""

    def __init__(self, connection: "Connection", query: str) -> None:
        if not query:
            raise EmptyStatement()
        self._connection = connection
        self._query = query
        self._is_closed = False

    @property
    def connection(self) -> "Connection":
        return self._connection

    @property
    def query(self) -> str:
        return self._query

    def num_input(self) -> int:
        # Placeholders are substituted client side and not counted.
        return -1

    def is_closed(self) -> bool:
        return self._is_closed or self._connection.is_closed()

    def close(self) -> None:
        self._is_closed = True

    def _check_open(self) -> None:
        if self._is_closed:
            raise InterfaceError("Statement is closed", errno=250002, sqlstate="08003")
        self._connection._check_open()

    def resolve(self, params: Sequence[Any] | Mapping[str, Any] | None = None) -> str:
        """Returns the query text with its parameters bound."""
        return bind_params(self._query, params)

    def fetch(self, params: Sequence[Any] | Mapping[str, Any] | None = None) -> pa.Table:
        """
        Runs the query and returns the raw result set.

        A cached result is returned without contacting the service when the
        connection has caching enabled and an unexpired entry exists.

        Raises:
            InterfaceError: The statement or its connection is closed.
            NetworkError: The report download failed.
        """
        self._check_open()
        conn = self._connection
        options = conn.options
        query = self.resolve(params)

        cache = conn.result_cache
        key = None
        if cache is not None:
            key = fingerprint(query, options.identity)
            cached = cache.get(key)
            if cached is not None:
                return cached

        columns = select_columns(query) if options.skip_column_header else None
        body = conn.transport.download_report(query, options)
        table = parse_report(body, columns)
        logger.debug(
            "Report downloaded",
            extra={"account": options.adwords_id, "rows": table.num_rows},
        )

        if cache is not None and key is not None:
            cache.put(key, table, options.cache.ttl)
        return table

    def execute(self, params: Sequence[Any] | Mapping[str, Any] | None = None) -> "Cursor":
        """Runs the statement on a new cursor and returns that cursor."""
        return self._connection.cursor().execute(self, params)
