from typing import NamedTuple, Optional, Sequence, TypedDict

from ..codec import AUTO_INT, PERCENT, STRING


class ResultMetadata(NamedTuple):
    """PEP 249 column description."""

    name: str
    type_code: str
    display_size: Optional[int]
    internal_size: Optional[int]
    precision: Optional[int]
    scale: Optional[int]
    is_nullable: bool


class ColumnInfo(TypedDict):
    """Represents metadata for a report column."""

    name: str
    account: str
    report: str
    kind: str
    type: str
    nullable: bool
    precision: Optional[int]
    scale: Optional[int]


KIND_TO_TYPE = {
    STRING: "text",
    PERCENT: "real",
    AUTO_INT: "fixed",
}


def describe_as_rowtype(
    columns: Sequence[str],
    kinds: Sequence[str],
    account: str | None = None,
    report: str | None = None,
) -> list[ColumnInfo]:
    """
    Describe report columns from their codec families.

    Args:
        columns: Column names, in result order.
        kinds: Codec family of each column (see :mod:`awqlduck.codec`).
        account: The account the report was run against.
        report: The report the columns come from.

    Raises:
        NotImplementedError: If a codec family is not recognized.
    """

    def as_column_info(name: str, kind: str) -> ColumnInfo:
        type_name = KIND_TO_TYPE.get(kind)
        if type_name is None:
            raise NotImplementedError(f"Unsupported column kind: {kind}")

        info: ColumnInfo = {
            "name": name,
            "account": account or "",
            "report": report or "",
            "kind": kind,
            "type": type_name,
            # Every report cell may carry the " --" sentinel.
            "nullable": True,
            "precision": None,
            "scale": None,
        }
        if type_name == "fixed":
            info["precision"] = 38
            info["scale"] = 0
        elif type_name == "real":
            info["scale"] = 2
        return info

    return [as_column_info(name, kind) for name, kind in zip(columns, kinds)]


def describe_as_result_metadata(
    columns: Sequence[str],
    kinds: Sequence[str],
) -> list[ResultMetadata]:
    return [
        ResultMetadata(
            name=c["name"],
            type_code=c["type"],
            display_size=None,
            internal_size=None,
            precision=c["precision"],
            scale=c["scale"],
            is_nullable=c["nullable"],
        )
        for c in describe_as_rowtype(columns, kinds)
    ]
