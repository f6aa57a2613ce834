import pytest

from awqlduck.codec import AUTO_INT, PERCENT, STRING, AutoExcludedInt, PercentValue, RowConverter, resolve_column_types
from awqlduck.errors import CodecError


def test_resolve_builtin_types_case_insensitive():
    kinds = resolve_column_types(["CampaignId", "ctr", "CpcBid", "Max. CPC"])
    assert kinds == [STRING, PERCENT, AUTO_INT, AUTO_INT]


def test_resolve_overrides_win():
    kinds = resolve_column_types(["Ctr", "Budget"], {"ctr": STRING, "Budget": AUTO_INT})
    assert kinds == [STRING, AUTO_INT]


def test_resolve_unknown_kind():
    with pytest.raises(ValueError, match="unknown column type"):
        resolve_column_types(["Ctr"], {"Ctr": "money"})


def test_convert_row():
    converter = RowConverter(["Campaign", "Ctr", "CpcBid"])
    row = converter.convert(["Brand", "< 10%", "auto: 5"])
    assert row == (
        "Brand",
        PercentValue(9.999, approximate=True, percent=True),
        AutoExcludedInt(5, auto=True),
    )


def test_convert_unset_string():
    converter = RowConverter(["Campaign"])
    assert converter.convert([" --"]) == (None,)


def test_convert_error_names_row_and_column():
    converter = RowConverter(["Campaign", "Ctr"])
    with pytest.raises(CodecError) as excinfo:
        converter.convert(["Brand", "lots"], row_number=7)
    assert "row 7" in str(excinfo.value)
    assert "'Ctr'" in str(excinfo.value)
