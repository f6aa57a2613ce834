from .connection import SKIP, Connection, Transaction
from .connector import Connector
from .cursor import Cursor
from .rowtype import ColumnInfo, ResultMetadata, describe_as_rowtype
from .statement import Statement

__all__ = [
    "SKIP",
    "Connection",
    "Connector",
    "Cursor",
    "ColumnInfo",
    "ResultMetadata",
    "Statement",
    "Transaction",
    "describe_as_rowtype",
]
