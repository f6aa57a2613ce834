from .codec import AutoExcludedInt, FormattedTime, NullableString, PercentValue, PrecisionFloat
from .connector import SKIP, Connection, Connector, Cursor, Statement
from .dsn import CachingDsn, ConnectionOptions, Dsn, format_duration, parse_dsn, parse_duration
from .errors import (
    AuthenticationRejected,
    CacheLockedError,
    CodecError,
    ConfigError,
    CredentialError,
    DatabaseError,
    DataError,
    EmptyStatement,
    Error,
    IntegrityError,
    InterfaceError,
    InternalError,
    MissingAccountId,
    MissingDeveloperToken,
    NetworkError,
    NetworkTimeout,
    NotSupportedError,
    OperationalError,
    ProgrammingError,
    TokenRefreshError,
    UnknownNamedClient,
    Warning,
)
from .net import ClientRegistry
from .shared import connect, register_http_client, unregister_http_client

apilevel = "2.0"
threadsafety = 1
paramstyle = "pyformat"

__all__ = [
    "apilevel",
    "threadsafety",
    "paramstyle",
    "connect",
    "register_http_client",
    "unregister_http_client",
    "SKIP",
    "ClientRegistry",
    "Connection",
    "CachingDsn",
    "ConnectionOptions",
    "Dsn",
    "Connector",
    "Cursor",
    "Statement",
    "format_duration",
    "parse_dsn",
    "parse_duration",
    "AutoExcludedInt",
    "FormattedTime",
    "NullableString",
    "PercentValue",
    "PrecisionFloat",
    "AuthenticationRejected",
    "CacheLockedError",
    "CodecError",
    "ConfigError",
    "CredentialError",
    "DatabaseError",
    "DataError",
    "EmptyStatement",
    "Error",
    "IntegrityError",
    "InterfaceError",
    "InternalError",
    "MissingAccountId",
    "MissingDeveloperToken",
    "NetworkError",
    "NetworkTimeout",
    "NotSupportedError",
    "OperationalError",
    "ProgrammingError",
    "TokenRefreshError",
    "UnknownNamedClient",
    "Warning",
]
