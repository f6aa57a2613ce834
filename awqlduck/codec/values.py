"""Typed values for the text encodings used in AdWords reports.

Reports never return a bare empty cell. They use a handful of sentinels:

* ``" --"`` for a field that was never set,
* ``"Excluded"`` for a value nulled by the report's context,
* ``"< 10%"`` and ``"> 90%"`` for percentages clamped at a boundary,
* ``"auto"`` and ``"auto: <n>"`` for values driven by an automatic strategy.

Each type below decodes those forms into a Python value and encodes it back
to the exact same text. Clamped markers are the one lossy case: ``"< 10%"``
decodes to ``9.999`` and encodes back to ``"< 10%"``, the number the service
hid is not recoverable.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..errors import CodecError

# Unset field.
DOUBLE_DASH = " --"
# Null by context.
EXCLUDED = "Excluded"
# Automatic strategy, optionally with the value it currently resolves to.
AUTO = "auto"
AUTO_VALUE = AUTO + ": "
# Clamped percentages.
ALMOST_10 = "< 10"
ALMOST_90 = "> 90"
ALMOST_10_VALUE = 9.999
ALMOST_90_VALUE = 90.001

PERCENT = "%"
THOUSANDS_SEP = ","

_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT = re.compile(r"[+-]?\d+")


def _require_text(src: Any) -> str:
    if not isinstance(src, str):
        raise CodecError(f"unknown value {src!r}: expected a string")
    return src


def _parse_float(text: str, original: str) -> float:
    if not _FLOAT.fullmatch(text):
        raise CodecError(f"unknown value {original!r}")
    return float(text)


def _parse_int(text: str, original: str) -> int:
    if not _INT.fullmatch(text):
        raise CodecError(f"unknown value {original!r}")
    return int(text)


@dataclass(frozen=True, slots=True)
class PercentValue:
    """A float that may be a percentage, null or clamped at 10% / 90%."""

    value: float | None = None
    approximate: bool = False
    percent: bool = False

    @property
    def valid(self) -> bool:
        return self.value is not None

    @classmethod
    def decode(cls, src: Any) -> "PercentValue":
        s = _require_text(src)
        if s == DOUBLE_DASH:
            return cls()

        percent = s.endswith(PERCENT)
        text = s[: -len(PERCENT)] if percent else s

        if text == ALMOST_10:
            return cls(ALMOST_10_VALUE, approximate=True, percent=percent)
        if text == ALMOST_90:
            return cls(ALMOST_90_VALUE, approximate=True, percent=percent)

        value = _parse_float(text.replace(THOUSANDS_SEP, ""), s)
        return cls(value, approximate=False, percent=percent)

    def encode(self) -> str:
        if self.value is None:
            return DOUBLE_DASH
        if self.approximate:
            text = ALMOST_90 if self.value > 90 else ALMOST_10
        else:
            text = f"{self.value:.2f}"
        if self.percent:
            return text + PERCENT
        return text


@dataclass(frozen=True, slots=True)
class AutoExcludedInt:
    """An integer that may be null, excluded, or set by an automatic strategy.

    ``auto`` with no value means the strategy picks the value; ``auto: 5``
    means it currently resolves to 5.
    """

    value: int | None = None
    auto: bool = False
    excluded: bool = False

    @property
    def valid(self) -> bool:
        return self.value is not None

    @classmethod
    def decode(cls, src: Any) -> "AutoExcludedInt":
        s = _require_text(src)
        if s == DOUBLE_DASH:
            return cls()
        if s == EXCLUDED:
            return cls(excluded=True)

        text, auto = _auto_valued(s)
        if auto and not text:
            return cls(auto=True)
        return cls(_parse_int(text, s), auto=auto)

    def encode(self) -> str:
        if self.excluded:
            return EXCLUDED
        if self.auto:
            if self.value is None:
                return AUTO
            return f"{AUTO_VALUE}{self.value}"
        if self.value is None:
            return DOUBLE_DASH
        return str(self.value)


def _auto_valued(s: str) -> tuple[str, bool]:
    """Trims the ``auto: `` or bare ``auto`` prefix and tells whether it was there."""
    if not s.startswith(AUTO):
        return s, False
    if s.startswith(AUTO_VALUE):
        return s[len(AUTO_VALUE) :], True
    return s[len(AUTO) :], True


@dataclass(frozen=True, slots=True)
class PrecisionFloat:
    value: float
    precision: int = 2

    def encode(self) -> str:
        if self.precision < 0:
            raise CodecError(f"invalid precision {self.precision}")
        return f"{self.value:.{self.precision}f}"


@dataclass(frozen=True, slots=True)
class NullableString:
    value: str | None = None

    @property
    def valid(self) -> bool:
        return self.value is not None

    @classmethod
    def decode(cls, src: Any) -> "NullableString":
        s = _require_text(src)
        if s == DOUBLE_DASH:
            return cls()
        return cls(s)

    def encode(self) -> str:
        if self.value is None:
            return DOUBLE_DASH
        return self.value


@dataclass(frozen=True, slots=True)
class FormattedTime:
    """A datetime rendered with a ``strftime`` layout, or ``" --"`` when unset."""

    instant: datetime | None = None
    layout: str = "%Y-%m-%d"

    @property
    def is_zero(self) -> bool:
        if self.instant is None:
            return True
        return self.instant.replace(tzinfo=None) == datetime.min

    def encode(self) -> str:
        if self.is_zero:
            return DOUBLE_DASH
        return self.instant.strftime(self.layout)
