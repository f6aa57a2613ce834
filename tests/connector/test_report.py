import pytest

from awqlduck.connector.report import parse_report
from awqlduck.errors import DataError

from ..conftest import REPORT_CSV


def test_parse_with_header():
    table = parse_report(REPORT_CSV)
    assert table.column_names == ["Campaign ID", "Campaign", "Impressions", "CTR", "Max. CPC"]
    assert table.num_rows == 3
    # quoted cells keep their separators; sentinels are untouched
    assert table.column("Impressions").to_pylist() == ["12,345", "980", " --"]


def test_parse_without_header():
    table = parse_report("1,a\n2,b\n", columns=["CampaignId", "CampaignName"])
    assert table.column_names == ["CampaignId", "CampaignName"]
    assert table.column("CampaignId").to_pylist() == ["1", "2"]


def test_parse_skips_blank_lines():
    table = parse_report("Id\n1\n\n2\n\n")
    assert table.column("Id").to_pylist() == ["1", "2"]


def test_parse_empty():
    assert parse_report("").num_columns == 0
    assert parse_report("", columns=["Id"]).num_rows == 0


def test_parse_width_mismatch():
    with pytest.raises(DataError, match="row 2 has 1 cells, expected 2"):
        parse_report("A,B\n1,2\n3\n")
