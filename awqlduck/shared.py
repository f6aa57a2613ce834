"""Process-wide defaults used by the module level API.

This module contains:
- The shared client registry, for ``http_client=<name>`` lookups
- The shared connector behind :func:`awqlduck.connect`
"""

from __future__ import annotations

from typing import Mapping

import httpx

from .connector import Connection, Connector
from .net import ClientRegistry

# Shared registry of named, pre-authenticated HTTP clients
shared_registry = ClientRegistry()

# Shared connector; result caches opened through it live for the process
shared_connector = Connector(registry=shared_registry)


def connect(dsn: str, column_types: Mapping[str, str] | None = None) -> Connection:
    """Opens a connection through the shared connector."""
    return shared_connector.connect(dsn, column_types=column_types)


def register_http_client(name: str, client: httpx.Client) -> None:
    shared_registry.register(name, client)


def unregister_http_client(name: str) -> None:
    shared_registry.unregister(name)
