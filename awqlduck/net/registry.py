import threading

import httpx

from ..errors import UnknownNamedClient


class ClientRegistry:
    """Pre-authenticated HTTP clients addressable by name.

    Connection strings refer to a registered client with
    ``http_client=<name>``. Registered clients are shared across connections
    and are never closed by them.

    Thread-safe: every operation holds the registry lock.
    """

    def __init__(self) -> None:
        self._clients: dict[str, httpx.Client] = {}
        self._lock = threading.Lock()

    def register(self, name: str, client: httpx.Client) -> None:
        """Registers a client, replacing any previous one with the same name."""
        if not name:
            raise ValueError("client name must not be empty")
        with self._lock:
            self._clients[name] = client

    def unregister(self, name: str) -> None:
        """Removes a client. Unknown names are ignored."""
        with self._lock:
            self._clients.pop(name, None)

    def lookup(self, name: str) -> httpx.Client:
        with self._lock:
            client = self._clients.get(name)
        if client is None:
            raise UnknownNamedClient(name)
        return client

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._clients)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._clients

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)
