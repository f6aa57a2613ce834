import pytest

from awqlduck.codec import AUTO_INT, PERCENT, STRING
from awqlduck.connector.rowtype import describe_as_result_metadata, describe_as_rowtype


def test_describe_as_rowtype():
    columns = describe_as_rowtype(
        ["CampaignName", "Ctr", "CpcBid"],
        [STRING, PERCENT, AUTO_INT],
        account="123-456-7890",
        report="CAMPAIGN_PERFORMANCE_REPORT",
    )
    assert columns == [
        {
            "name": "CampaignName",
            "account": "123-456-7890",
            "report": "CAMPAIGN_PERFORMANCE_REPORT",
            "kind": "string",
            "type": "text",
            "nullable": True,
            "precision": None,
            "scale": None,
        },
        {
            "name": "Ctr",
            "account": "123-456-7890",
            "report": "CAMPAIGN_PERFORMANCE_REPORT",
            "kind": "percent",
            "type": "real",
            "nullable": True,
            "precision": None,
            "scale": 2,
        },
        {
            "name": "CpcBid",
            "account": "123-456-7890",
            "report": "CAMPAIGN_PERFORMANCE_REPORT",
            "kind": "auto_int",
            "type": "fixed",
            "nullable": True,
            "precision": 38,
            "scale": 0,
        },
    ]


def test_unsupported_kind():
    with pytest.raises(NotImplementedError):
        describe_as_rowtype(["Budget"], ["money"])


def test_describe_as_result_metadata():
    (meta,) = describe_as_result_metadata(["Ctr"], [PERCENT])
    assert meta.name == "Ctr"
    assert meta.type_code == "real"
    assert meta.scale == 2
    assert meta.is_nullable
    assert meta.display_size is None
