from collections.abc import Mapping, Sequence
from typing import Any, Callable

from ..errors import CodecError
from .values import AutoExcludedInt, NullableString, PercentValue

STRING = "string"
PERCENT = "percent"
AUTO_INT = "auto_int"


def _decode_string(text: Any) -> str | None:
    return NullableString.decode(text).value


DECODERS: dict[str, Callable[[Any], Any]] = {
    STRING: _decode_string,
    PERCENT: PercentValue.decode,
    AUTO_INT: AutoExcludedInt.decode,
}

# Report columns whose encoding is known up front, by field name and by the
# display name the service uses in column headers. Matched case-insensitively.
DEFAULT_COLUMN_TYPES: dict[str, str] = {
    "Ctr": PERCENT,
    "ConversionRate": PERCENT,
    "AllConversionRate": PERCENT,
    "InteractionRate": PERCENT,
    "VideoViewRate": PERCENT,
    "SearchImpressionShare": PERCENT,
    "SearchExactMatchImpressionShare": PERCENT,
    "SearchBudgetLostImpressionShare": PERCENT,
    "SearchRankLostImpressionShare": PERCENT,
    "ContentImpressionShare": PERCENT,
    "ContentBudgetLostImpressionShare": PERCENT,
    "ContentRankLostImpressionShare": PERCENT,
    "CTR": PERCENT,
    "Conv. rate": PERCENT,
    "Interaction Rate": PERCENT,
    "Search Impr. share": PERCENT,
    "Search Lost IS (rank)": PERCENT,
    "Search Lost IS (budget)": PERCENT,
    "Content Impr. share": PERCENT,
    "CpcBid": AUTO_INT,
    "CpmBid": AUTO_INT,
    "CpvBid": AUTO_INT,
    "Max. CPC": AUTO_INT,
    "Max. CPM": AUTO_INT,
    "Max. CPV": AUTO_INT,
}


def resolve_column_types(
    columns: Sequence[str],
    overrides: Mapping[str, str] | None = None,
) -> list[str]:
    """Returns the codec family of each column, overrides first."""
    merged = {name.lower(): kind for name, kind in DEFAULT_COLUMN_TYPES.items()}
    for name, kind in (overrides or {}).items():
        if kind not in DECODERS:
            raise ValueError(f"unknown column type {kind!r} for column {name!r}")
        merged[name.lower()] = kind
    return [merged.get(column.lower(), STRING) for column in columns]


class RowConverter:
    """Decodes raw report rows cell by cell."""

    def __init__(
        self,
        columns: Sequence[str],
        column_types: Mapping[str, str] | None = None,
    ) -> None:
        self._columns = list(columns)
        self._kinds = resolve_column_types(self._columns, column_types)
        self._decoders = [DECODERS[kind] for kind in self._kinds]

    @property
    def kinds(self) -> list[str]:
        return list(self._kinds)

    def convert(self, row: Sequence[Any], row_number: int | None = None) -> tuple[Any, ...]:
        """
        Raises:
            CodecError: A cell could not be decoded. The message names the
                row and column.
        """
        values = []
        for column, decode, cell in zip(self._columns, self._decoders, row):
            try:
                values.append(decode(cell))
            except CodecError as e:
                where = f"column {column!r}" if row_number is None else f"row {row_number}, column {column!r}"
                raise CodecError(f"{where}: {e.msg}") from e
        return tuple(values)
