import httpx
import pytest

import awqlduck
from awqlduck.errors import UnknownNamedClient

from .conftest import ACCOUNT, FakeAdWords


def test_module_globals():
    assert awqlduck.apilevel == "2.0"
    assert awqlduck.threadsafety == 1
    assert awqlduck.paramstyle == "pyformat"


def test_connect_with_registered_client(service: FakeAdWords):
    client = httpx.Client(transport=httpx.MockTransport(service))
    awqlduck.register_http_client("test-shared", client)
    try:
        with awqlduck.connect(f"adwords?adwords_id={ACCOUNT}&http_client=test-shared") as conn:
            rows = conn.cursor().execute("SELECT CampaignId FROM CAMPAIGN_PERFORMANCE_REPORT").fetchall()
        assert len(rows) == 3
        assert not client.is_closed
    finally:
        awqlduck.unregister_http_client("test-shared")
        client.close()

    with pytest.raises(UnknownNamedClient):
        awqlduck.connect(f"adwords?adwords_id={ACCOUNT}&http_client=test-shared")
