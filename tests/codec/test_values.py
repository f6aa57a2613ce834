from datetime import datetime

import pytest

from awqlduck.codec import (
    AutoExcludedInt,
    FormattedTime,
    NullableString,
    PercentValue,
    PrecisionFloat,
)
from awqlduck.errors import CodecError


def test_percent_unset():
    value = PercentValue.decode(" --")
    assert value.value is None
    assert not value.valid
    assert not value.approximate
    assert value.encode() == " --"


def test_percent_zero():
    value = PercentValue.decode("0.00%")
    assert value == PercentValue(0.0, approximate=False, percent=True)
    assert value.valid
    assert value.encode() == "0.00%"


def test_percent_almost_10():
    value = PercentValue.decode("< 10%")
    assert value.value == 9.999
    assert value.approximate
    assert value.percent
    assert value.encode() == "< 10%"


def test_percent_almost_90():
    value = PercentValue.decode("> 90%")
    assert value.value == 90.001
    assert value.approximate
    assert value.percent
    assert value.encode() == "> 90%"


def test_percent_markers_without_suffix():
    assert PercentValue.decode("< 10").encode() == "< 10"
    assert PercentValue.decode("> 90").encode() == "> 90"
    assert not PercentValue.decode("> 90").percent


def test_percent_thousands_separator():
    value = PercentValue.decode("1,234.5")
    assert value.value == 1234.5
    assert not value.percent
    assert value.encode() == "1234.50"


@pytest.mark.parametrize(
    "value",
    [
        PercentValue(),
        PercentValue(12.5, percent=True),
        PercentValue(3.0),
        PercentValue(9.999, approximate=True, percent=True),
        PercentValue(90.001, approximate=True),
    ],
)
def test_percent_decode_inverts_encode(value):
    assert PercentValue.decode(value.encode()) == value


@pytest.mark.parametrize("text", ["", "%", "abc", "12.3.4%", "nan", "1_000"])
def test_percent_rejects_garbage(text):
    with pytest.raises(CodecError) as excinfo:
        PercentValue.decode(text)
    assert repr(text) in str(excinfo.value)


def test_percent_rejects_non_string():
    with pytest.raises(CodecError):
        PercentValue.decode(4.5)


def test_auto():
    value = AutoExcludedInt.decode("auto")
    assert value.value is None
    assert value.auto
    assert not value.excluded
    assert value.encode() == "auto"


def test_auto_with_value():
    value = AutoExcludedInt.decode("auto: 5")
    assert value == AutoExcludedInt(5, auto=True)
    assert value.encode() == "auto: 5"


def test_excluded():
    value = AutoExcludedInt.decode("Excluded")
    assert value.excluded
    assert value.value is None
    assert value.encode() == "Excluded"


def test_auto_unset():
    value = AutoExcludedInt.decode(" --")
    assert value == AutoExcludedInt()
    assert not value.auto
    assert not value.excluded
    assert value.encode() == " --"


def test_plain_integer():
    value = AutoExcludedInt.decode("-42")
    assert value == AutoExcludedInt(-42)
    assert value.encode() == "-42"


def test_auto_prefix_without_colon():
    assert AutoExcludedInt.decode("auto7") == AutoExcludedInt(7, auto=True)


def test_excluded_wins_over_auto():
    assert AutoExcludedInt(3, auto=True, excluded=True).encode() == "Excluded"


@pytest.mark.parametrize("text", ["", "auto: x", "auto:5", "1.5", "Exclude"])
def test_auto_rejects_garbage(text):
    with pytest.raises(CodecError):
        AutoExcludedInt.decode(text)


def test_auto_rejects_non_string():
    with pytest.raises(CodecError):
        AutoExcludedInt.decode(None)


def test_precision_float():
    assert PrecisionFloat(3.14159, 2).encode() == "3.14"
    assert PrecisionFloat(2.0, 0).encode() == "2"
    assert PrecisionFloat(0.5, 4).encode() == "0.5000"


def test_precision_float_negative_precision():
    with pytest.raises(CodecError):
        PrecisionFloat(1.0, -1).encode()


def test_nullable_string():
    assert NullableString().encode() == " --"
    assert NullableString("Brand").encode() == "Brand"
    assert NullableString.decode(" --").value is None
    assert NullableString.decode("Brand").value == "Brand"


def test_formatted_time():
    instant = datetime(2017, 6, 1, 13, 45)
    assert FormattedTime(instant, "%Y-%m-%d").encode() == "2017-06-01"
    assert FormattedTime(instant, "%Y%m%d %H:%M").encode() == "20170601 13:45"


def test_formatted_time_unset():
    assert FormattedTime().encode() == " --"
    assert FormattedTime(datetime.min, "%Y").encode() == " --"
