"""Authenticated HTTP transport for the report download service."""

from __future__ import annotations

import logging
import re

import httpx

from ..dsn import ConnectionOptions, NamedClient, NoCredentials, RefreshToken, StaticToken
from ..errors import AuthenticationRejected, InterfaceError, NetworkError, NetworkTimeout
from .oauth2 import BearerAuth, RefreshTokenSource, StaticTokenSource, TokenSource
from .registry import ClientRegistry

logger = logging.getLogger(__name__)

DEVELOPER_TOKEN_HEADER = "developerToken"
REPORT_DOWNLOAD_URL = "https://adwords.google.com/api/adwords/reportdownload/{version}"
REPORT_FORMAT = "CSV"

# Extra time granted to calls that may first have to refresh their token.
TOKEN_REFRESH_ALLOWANCE = 15.0

_API_ERROR_TYPE = re.compile(r"<type>\s*([^<]+?)\s*</type>")


def clone_request(
    request: httpx.Request,
    extra_headers: list[tuple[str, str]] | None = None,
) -> httpx.Request:
    """Copy a request so that header changes do not leak back to the original.

    The body stream and extensions are shared; the header list is copied and
    ``extra_headers`` are appended to the copy.
    """
    headers = list(request.headers.multi_items())
    if extra_headers:
        headers.extend(extra_headers)
    return httpx.Request(
        method=request.method,
        url=request.url,
        headers=httpx.Headers(headers),
        stream=request.stream,
        extensions=dict(request.extensions),
    )


class DeveloperTokenTransport(httpx.BaseTransport):
    """Adds the developer token header to every outgoing request."""

    def __init__(self, transport: httpx.BaseTransport, developer_token: str) -> None:
        self._transport = transport
        self._developer_token = developer_token

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        outgoing = clone_request(request, [(DEVELOPER_TOKEN_HEADER, self._developer_token)])
        return self._transport.handle_request(outgoing)

    def close(self) -> None:
        self._transport.close()


class AuthenticatedTransport:
    """An HTTP client bound to one connection.

    Owned clients are closed with the transport; clients borrowed from a
    :class:`ClientRegistry` are only released.
    """

    def __init__(
        self,
        client: httpx.Client,
        developer_token: str = "",
        owned: bool = True,
        token_client: httpx.Client | None = None,
    ) -> None:
        self._client: httpx.Client | None = client
        self._developer_token = developer_token
        self._owned = owned
        self._token_client = token_client

    @property
    def developer_token(self) -> str:
        return self._developer_token

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            raise InterfaceError("transport is closed", errno=250002, sqlstate="08003")
        return self._client

    @property
    def is_closed(self) -> bool:
        return self._client is None

    def close(self) -> None:
        if self._client is None:
            return
        if self._owned:
            self._client.close()
        if self._token_client is not None:
            self._token_client.close()
        self._client = None
        self._token_client = None

    def download_report(self, query: str, options: ConnectionOptions) -> str:
        """Runs an AWQL query and returns the CSV body of the report."""
        url = REPORT_DOWNLOAD_URL.format(version=options.version)
        headers = {
            "clientCustomerId": options.adwords_id,
            "skipReportHeader": "true",
            "skipReportSummary": "true",
            "skipColumnHeader": _bool_header(options.skip_column_header),
            "includeZeroImpressions": _bool_header(options.include_zero_impressions),
            "useRawEnumValues": _bool_header(options.use_raw_enum_values),
        }
        data = {"__rdquery": query, "__fmt": REPORT_FORMAT}

        logger.debug(
            "HTTP request",
            extra={"method": "POST", "url": url, "account": options.adwords_id},
        )
        try:
            response = self.client.post(url, data=data, headers=headers)
        except httpx.TimeoutException as exc:
            raise NetworkTimeout(f"report download timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"report download failed: {exc}") from exc

        logger.debug(
            "HTTP response",
            extra={"status_code": response.status_code, "url": url},
        )
        if response.status_code in (401, 403):
            raise AuthenticationRejected(
                f"HTTP {response.status_code}: authentication rejected: {_api_error(response)}"
            )
        if response.is_error:
            raise NetworkError(f"HTTP {response.status_code}: {_api_error(response)}")
        return response.text


def _bool_header(value: bool) -> str:
    return "true" if value else "false"


def _api_error(response: httpx.Response) -> str:
    match = _API_ERROR_TYPE.search(response.text)
    if match:
        return match.group(1)
    return response.text.strip() or response.reason_phrase


def _token_client(base: httpx.BaseTransport | None, timeout: float) -> httpx.Client:
    if base is None:
        return httpx.Client(timeout=timeout)
    return httpx.Client(transport=base, timeout=timeout)


def _authorized_client(
    source: TokenSource,
    developer_token: str,
    base: httpx.BaseTransport | None,
    timeout: float,
) -> httpx.Client:
    inner = base if base is not None else httpx.HTTPTransport()
    return httpx.Client(
        transport=DeveloperTokenTransport(inner, developer_token),
        auth=BearerAuth(source),
        timeout=timeout,
    )


def resolve_transport(
    options: ConnectionOptions,
    registry: ClientRegistry,
    base_transport: httpx.BaseTransport | None = None,
) -> AuthenticatedTransport:
    """Turns the connection's credentials into an authenticated transport.

    No network call is made here; the refresh token flow fetches its first
    access token on the first request.

    Args:
        options: Validated connection options.
        registry: Where ``http_client=<name>`` is looked up.
        base_transport: Underlying httpx transport, mostly for tests.

    Raises:
        UnknownNamedClient: The named client is not registered.
    """
    creds = options.credentials

    if isinstance(creds, NamedClient):
        return AuthenticatedTransport(registry.lookup(creds.name), owned=False)

    if isinstance(creds, StaticToken):
        client = _authorized_client(
            StaticTokenSource(creds.access_token),
            creds.developer_token,
            base_transport,
            options.timeout,
        )
        return AuthenticatedTransport(client, creds.developer_token)

    if isinstance(creds, RefreshToken):
        timeout = options.timeout + TOKEN_REFRESH_ALLOWANCE
        token_client = _token_client(base_transport, options.timeout)
        source = RefreshTokenSource(
            creds.client_id,
            creds.client_secret,
            creds.refresh_token,
            http_client=token_client,
        )
        client = _authorized_client(source, creds.developer_token, base_transport, timeout)
        return AuthenticatedTransport(client, creds.developer_token, token_client=token_client)

    if isinstance(creds, NoCredentials):
        if base_transport is None:
            return AuthenticatedTransport(httpx.Client(timeout=options.timeout))
        return AuthenticatedTransport(httpx.Client(transport=base_transport, timeout=options.timeout))

    raise InterfaceError(f"unsupported credential source {type(creds).__name__}")
