from .converter import AUTO_INT, DEFAULT_COLUMN_TYPES, PERCENT, STRING, RowConverter, resolve_column_types
from .values import (
    AUTO,
    AUTO_VALUE,
    DOUBLE_DASH,
    EXCLUDED,
    AutoExcludedInt,
    FormattedTime,
    NullableString,
    PercentValue,
    PrecisionFloat,
)

__all__ = [
    "AUTO",
    "AUTO_INT",
    "AUTO_VALUE",
    "DEFAULT_COLUMN_TYPES",
    "DOUBLE_DASH",
    "EXCLUDED",
    "PERCENT",
    "STRING",
    "AutoExcludedInt",
    "FormattedTime",
    "NullableString",
    "PercentValue",
    "PrecisionFloat",
    "RowConverter",
    "resolve_column_types",
]
