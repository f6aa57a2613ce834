import logging
import os
import threading
import time
from typing import Callable, Mapping

import httpx

from ..cache import ResultCache
from ..dsn import CacheSettings, ConnectionOptions
from ..net import ClientRegistry, resolve_transport
from .connection import Connection

logger = logging.getLogger(__name__)


class Connector:
    def __init__(
        self,
        registry: ClientRegistry | None = None,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initializes the connector factory.

        Args:
            registry: Named HTTP clients usable with ``http_client=<name>``.
                Defaults to an empty registry owned by this connector.
            transport: Underlying httpx transport for the clients this
                connector builds. Defaults to a real network transport.
            clock: Time source of the result caches.
        """
        self._registry = registry if registry is not None else ClientRegistry()
        self._transport = transport
        self._clock = clock

        # One result cache per directory, shared by all connections of this
        # connector and flushed once when first opened.
        self._caches: dict[str, ResultCache] = {}
        self._lock = threading.Lock()

    @property
    def registry(self) -> ClientRegistry:
        return self._registry

    def connect(
        self,
        dsn: str,
        column_types: Mapping[str, str] | None = None,
    ) -> Connection:
        """
        Opens a connection described by ``dsn``.

        Everything is validated before any network call: the connection
        string, the credentials and the cache directory.

        Args:
            dsn: Connection string, see :mod:`awqlduck.dsn`.
            column_types: Codec family per column name, merged over the
                built-in column types.

        Raises:
            ConfigError: The connection string is invalid.
            CredentialError: Credentials are missing or unknown.
            CacheLockedError: The cache directory is used by another process.
        """
        options = ConnectionOptions.from_dsn(dsn)
        transport = resolve_transport(options, self._registry, self._transport)
        cache = None
        if options.cache.enabled:
            try:
                cache = self._cache_for(options.cache)
            except Exception:
                transport.close()
                raise

        logger.debug(
            "Connection opened",
            extra={
                "account": options.adwords_id,
                "version": options.version,
                "cache": options.cache.directory if cache else None,
            },
        )
        return Connection(options, transport, cache, column_types)

    def _cache_for(self, settings: CacheSettings) -> ResultCache:
        key = os.path.abspath(settings.directory)
        with self._lock:
            cache = self._caches.get(key)
            if cache is None:
                cache = ResultCache(key, settings.ttl, clock=self._clock)
                cache.flush_all()
                self._caches[key] = cache
            return cache

    def close(self) -> None:
        """
        Closes the result caches opened by this connector.
        """
        with self._lock:
            for cache in self._caches.values():
                cache.close()
            self._caches.clear()
