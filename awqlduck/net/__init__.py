from .oauth2 import BearerAuth, RefreshTokenSource, StaticTokenSource, Token, TokenSource
from .registry import ClientRegistry
from .transport import (
    DEVELOPER_TOKEN_HEADER,
    AuthenticatedTransport,
    DeveloperTokenTransport,
    clone_request,
    resolve_transport,
)

__all__ = [
    "DEVELOPER_TOKEN_HEADER",
    "AuthenticatedTransport",
    "BearerAuth",
    "ClientRegistry",
    "DeveloperTokenTransport",
    "RefreshTokenSource",
    "StaticTokenSource",
    "Token",
    "TokenSource",
    "clone_request",
    "resolve_transport",
]
