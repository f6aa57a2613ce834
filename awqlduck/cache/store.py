"""Disk cache of report result sets.

Entries live in a DuckDB file inside the cache directory, one row per query
fingerprint, with the result set stored as an Arrow IPC stream. DuckDB holds
a file lock on the database, so only one process can use a cache directory
at a time; threads of that process share one :class:`ResultCache`, which
serializes access with a lock.
"""

from __future__ import annotations

import hashlib
import logging
import os
import threading
import time
from datetime import timedelta
from typing import Callable, Iterable

import duckdb
import pyarrow as pa

from ..errors import CacheLockedError, InterfaceError

logger = logging.getLogger(__name__)

CACHE_FILE = "results.duckdb"
DEFAULT_TTL = timedelta(hours=24)

SQL_CREATE = """
CREATE TABLE IF NOT EXISTS result_cache (
    fingerprint VARCHAR PRIMARY KEY,
    payload BLOB NOT NULL,
    created_at DOUBLE NOT NULL,
    expires_at DOUBLE NOT NULL
)
"""
SQL_SELECT = "SELECT payload, expires_at FROM result_cache WHERE fingerprint = ?"
SQL_UPSERT = "INSERT OR REPLACE INTO result_cache VALUES (?, ?, ?, ?)"
SQL_DELETE = "DELETE FROM result_cache WHERE fingerprint = ?"
SQL_FLUSH = "DELETE FROM result_cache"
SQL_COUNT = "SELECT count(*) FROM result_cache"


def fingerprint(query: str, identity: Iterable[str]) -> str:
    """Key of a result set: the resolved query plus the connection identity.

    The same query against two accounts, or with different report flags,
    never shares an entry.
    """
    digest = hashlib.sha256()
    for part in (*identity, query):
        digest.update(part.encode("utf-8"))
        digest.update(b"\x1f")
    return digest.hexdigest()


def _serialize(table: pa.Table) -> bytes:
    sink = pa.BufferOutputStream()
    with pa.ipc.new_stream(sink, table.schema) as writer:
        writer.write_table(table)
    return sink.getvalue().to_pybytes()


def _deserialize(payload: bytes) -> pa.Table:
    return pa.ipc.open_stream(payload).read_all()


class ResultCache:
    def __init__(
        self,
        directory: str,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Opens (or creates) the cache stored in ``directory``.

        Args:
            directory: Where the cache database lives. Created if missing.
            ttl: Default lifetime of an entry.
            clock: Returns the current time in seconds since the epoch.

        Raises:
            CacheLockedError: Another process holds the cache directory.
        """
        if ttl <= timedelta(0):
            raise ValueError(f"cache ttl must be positive, got {ttl}")
        self._directory = directory
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()

        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, CACHE_FILE)
        try:
            self._duck_conn: duckdb.DuckDBPyConnection | None = duckdb.connect(database=path)
        except duckdb.IOException as e:
            raise CacheLockedError(f"cache directory {directory!r} is in use: {e}") from None
        self._duck_conn.execute(SQL_CREATE)

    @property
    def directory(self) -> str:
        return self._directory

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def _conn(self) -> duckdb.DuckDBPyConnection:
        if self._duck_conn is None:
            raise InterfaceError("Result cache is closed", errno=250002, sqlstate="08003")
        return self._duck_conn

    def get(self, key: str) -> pa.Table | None:
        """Returns the cached result set, or None when missing or expired."""
        with self._lock:
            conn = self._conn()
            row = conn.execute(SQL_SELECT, [key]).fetchone()
            if row is None:
                logger.debug("Cache miss", extra={"cache": "miss", "fingerprint": key})
                return None
            payload, expires_at = row
            if expires_at <= self._clock():
                conn.execute(SQL_DELETE, [key])
                logger.debug("Cache entry expired", extra={"cache": "expired", "fingerprint": key})
                return None
        logger.debug("Cache hit", extra={"cache": "hit", "fingerprint": key})
        return _deserialize(payload)

    def put(self, key: str, payload: pa.Table, ttl: timedelta | None = None) -> None:
        ttl = self._ttl if ttl is None else ttl
        if ttl <= timedelta(0):
            raise ValueError(f"cache ttl must be positive, got {ttl}")
        blob = _serialize(payload)
        with self._lock:
            created_at = self._clock()
            self._conn().execute(
                SQL_UPSERT,
                [key, blob, created_at, created_at + ttl.total_seconds()],
            )
        logger.debug("Cache put", extra={"cache": "put", "fingerprint": key, "rows": payload.num_rows})

    def flush_all(self) -> None:
        """Removes every entry, expired or not."""
        with self._lock:
            self._conn().execute(SQL_FLUSH)
        logger.debug("Cache flushed", extra={"cache": "flush", "directory": self._directory})

    def __len__(self) -> int:
        with self._lock:
            (count,) = self._conn().execute(SQL_COUNT).fetchone()
        return count

    def close(self) -> None:
        with self._lock:
            if self._duck_conn is not None:
                self._duck_conn.close()
                self._duck_conn = None

    def is_closed(self) -> bool:
        return self._duck_conn is None
