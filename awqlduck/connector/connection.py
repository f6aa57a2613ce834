import enum
import logging
from types import TracebackType
from typing import Mapping, Self

from ..cache import ResultCache
from ..dsn import ConnectionOptions
from ..errors import InterfaceError, NotSupportedError
from ..net import AuthenticatedTransport
from .cursor import Cursor
from .statement import Statement

logger = logging.getLogger(__name__)


class Transaction(enum.Enum):
    # The service has no transactions; callers proceed without one.
    SKIP = "skip"


SKIP = Transaction.SKIP


class Connection:
    def __init__(
        self,
        options: ConnectionOptions,
        transport: AuthenticatedTransport,
        result_cache: ResultCache | None = None,
        column_types: Mapping[str, str] | None = None,
    ) -> None:
        self._options = options
        self._transport = transport
        self._result_cache = result_cache
        self._column_types = dict(column_types or {})
        self._is_closed = False

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._is_closed:
            raise InterfaceError("Connection is closed", errno=250002, sqlstate="08003")

    def cursor(self) -> Cursor:
        """
        Returns a new Cursor object for executing queries.
        """
        self._check_open()
        return Cursor(self)

    def prepare(self, query: str) -> Statement:
        """
        Returns a statement bound to this connection.

        Raises:
            EmptyStatement: ``query`` is empty.
        """
        self._check_open()
        return Statement(self, query)

    def begin(self) -> Transaction:
        """Transactions are not supported: always returns :data:`SKIP`."""
        self._check_open()
        return SKIP

    def commit(self) -> None:
        # Reports are read-only, there is never anything to commit.
        self._check_open()

    def rollback(self) -> None:
        self._check_open()
        raise NotSupportedError("transactions are not supported")

    def autocommit(self, _mode: bool) -> None:
        pass

    def close(self) -> None:
        """
        Closes the connection and releases its transport.
        """
        if self._is_closed:
            return
        self._transport.close()
        self._is_closed = True
        logger.debug("Connection closed", extra={"account": self._options.adwords_id})

    def is_closed(self) -> bool:
        return self._is_closed

    @property
    def options(self) -> ConnectionOptions:
        return self._options

    @property
    def adwords_id(self) -> str:
        return self._options.adwords_id

    @property
    def version(self) -> str:
        return self._options.version

    @property
    def transport(self) -> AuthenticatedTransport:
        self._check_open()
        return self._transport

    @property
    def result_cache(self) -> ResultCache | None:
        return self._result_cache

    @property
    def column_types(self) -> dict[str, str]:
        return dict(self._column_types)
