"""PEP 249 exception hierarchy for awqlduck.

Every error carries an ``errno`` and a ``sqlstate`` so callers can tell
failures apart without matching on messages. ``str(error)`` renders as
``"<errno> (<sqlstate>): <msg>"``.
"""

from __future__ import annotations


class Error(Exception):
    errno: int = 0
    sqlstate: str = "HY000"

    def __init__(
        self,
        msg: str = "",
        errno: int | None = None,
        sqlstate: str | None = None,
    ) -> None:
        super().__init__(msg)
        self.msg = msg
        if errno is not None:
            self.errno = errno
        if sqlstate is not None:
            self.sqlstate = sqlstate

    def __str__(self) -> str:
        return f"{self.errno:06d} ({self.sqlstate}): {self.msg}"


class Warning(Exception):  # noqa: A001 - name mandated by PEP 249
    pass


class InterfaceError(Error):
    errno = 250000
    sqlstate = "08001"


class DatabaseError(Error):
    pass


class DataError(DatabaseError):
    errno = 100038
    sqlstate = "22018"


class OperationalError(DatabaseError):
    errno = 250001
    sqlstate = "08001"


class IntegrityError(DatabaseError):
    sqlstate = "23000"


class InternalError(DatabaseError):
    sqlstate = "XX000"


class ProgrammingError(DatabaseError):
    errno = 1003
    sqlstate = "42000"


class NotSupportedError(DatabaseError):
    errno = 2
    sqlstate = "0A000"


# Connection string errors, raised before any resource is acquired.
class ConfigError(InterfaceError):
    errno = 251001
    sqlstate = "08001"


# Credential errors, raised at open time before any network call.
class CredentialError(InterfaceError):
    errno = 251005
    sqlstate = "28000"


class MissingDeveloperToken(CredentialError):
    def __init__(self, msg: str = "developer token is required with an access or refresh token") -> None:
        super().__init__(msg)


class UnknownNamedClient(CredentialError):
    def __init__(self, name: str) -> None:
        super().__init__(f"no http client with the name {name!r}")
        self.name = name


class MissingAccountId(CredentialError):
    def __init__(self, msg: str = "adwords_id is required") -> None:
        super().__init__(msg)


class CodecError(DataError):
    pass


class NetworkError(OperationalError):
    errno = 250003


class NetworkTimeout(NetworkError):
    errno = 250004
    sqlstate = "HYT00"


class AuthenticationRejected(NetworkError):
    errno = 390100
    sqlstate = "28000"


class TokenRefreshError(NetworkError):
    errno = 390110
    sqlstate = "28000"


class CacheLockedError(OperationalError):
    errno = 250010


class EmptyStatement(ProgrammingError, EOFError):
    """No query text to prepare: the statement ended before it started."""

    errno = 900

    def __init__(self, msg: str = "empty query") -> None:
        super().__init__(msg)
