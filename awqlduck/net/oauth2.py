"""OAuth2 token sources and the httpx auth flow that consumes them.

A :class:`TokenSource` hands out a currently valid :class:`Token`. The refresh
token source exchanges its refresh token against the Google OAuth endpoint and
renews the access token shortly before it expires. Refresh failures surface
as :class:`~awqlduck.errors.TokenRefreshError`.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generator, Protocol

import httpx

from ..errors import TokenRefreshError

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"

# Lifetime assumed when the endpoint does not announce one.
TOKEN_EXPIRY_DURATION = 60 * 60.0
# Tokens are renewed once fewer than this many seconds remain.
TOKEN_EXPIRY_DELTA = 10.0


@dataclass(frozen=True, slots=True)
class Token:
    access_token: str
    token_type: str = "Bearer"
    expires_at: float | None = None

    def valid(self, now: float) -> bool:
        if not self.access_token:
            return False
        if self.expires_at is None:
            return True
        return now < self.expires_at - TOKEN_EXPIRY_DELTA


class TokenSource(Protocol):
    def token(self) -> Token:
        """Return a token that is valid right now."""


class StaticTokenSource:
    """Always returns the same token. It never expires from our side."""

    def __init__(self, access_token: str) -> None:
        self._token = Token(access_token=access_token)

    def token(self) -> Token:
        return self._token


class RefreshTokenSource:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        token_url: str = GOOGLE_TOKEN_URL,
        http_client: httpx.Client | None = None,
        timeout: float = 15.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._token_url = token_url
        self._http_client = http_client
        self._timeout = timeout
        self._clock = clock
        self._token: Token | None = None
        self._lock = threading.Lock()

    def token(self) -> Token:
        with self._lock:
            if self._token is None or not self._token.valid(self._clock()):
                self._token = self._refresh()
            return self._token

    def _refresh(self) -> Token:
        data = {
            "grant_type": "refresh_token",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "refresh_token": self._refresh_token,
        }
        logger.debug("Refreshing access token", extra={"url": self._token_url})
        try:
            if self._http_client is not None:
                response = self._http_client.post(self._token_url, data=data)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.post(self._token_url, data=data)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise TokenRefreshError(
                f"token refresh rejected with HTTP {exc.response.status_code}: {exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise TokenRefreshError(f"token refresh failed: {exc}") from exc
        except ValueError as exc:
            raise TokenRefreshError(f"token refresh returned invalid JSON: {exc}") from exc

        access_token = payload.get("access_token")
        if not access_token:
            raise TokenRefreshError("token refresh response has no access_token")

        # Google may rotate the refresh token.
        if new_refresh := payload.get("refresh_token"):
            self._refresh_token = new_refresh

        expires_in = float(payload.get("expires_in") or TOKEN_EXPIRY_DURATION)
        return Token(
            access_token=access_token,
            token_type=payload.get("token_type") or "Bearer",
            expires_at=self._clock() + expires_in,
        )


class BearerAuth(httpx.Auth):
    """Stamps each request with the current token of a :class:`TokenSource`."""

    def __init__(self, source: TokenSource) -> None:
        self._source = source

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self._source.token()
        request.headers["Authorization"] = f"{token.token_type} {token.access_token}"
        yield request
