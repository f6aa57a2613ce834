import pytest

from awqlduck import Connection, Statement
from awqlduck.errors import EmptyStatement, InterfaceError

from ..conftest import FakeAdWords

QUERY = "SELECT CampaignId FROM CAMPAIGN_PERFORMANCE_REPORT WHERE CampaignId = %(id)s"


def test_empty_statement(conn: Connection):
    with pytest.raises(EmptyStatement, match="empty query"):
        Statement(conn, "")


def test_num_input(conn: Connection):
    assert conn.prepare(QUERY).num_input() == -1


def test_resolve(conn: Connection):
    stmt = conn.prepare(QUERY)
    assert stmt.resolve({"id": 7}).endswith("CampaignId = 7")
    # the prepared text is left as is
    assert stmt.query == QUERY


def test_fetch_raw(conn: Connection, service: FakeAdWords):
    table = conn.prepare(QUERY).fetch({"id": 1001})
    assert table.num_rows == 3
    assert table.column("CTR").to_pylist() == ["4.50%", "< 10%", "> 90%"]
    assert FakeAdWords.form(service.requests[0])["__rdquery"].endswith("CampaignId = 1001")


def test_close(conn: Connection):
    stmt = conn.prepare(QUERY)
    assert not stmt.is_closed()
    stmt.close()
    assert stmt.is_closed()
    with pytest.raises(InterfaceError, match="Statement is closed"):
        stmt.fetch({"id": 1})


def test_closed_with_connection(conn: Connection):
    stmt = conn.prepare(QUERY)
    conn.close()
    assert stmt.is_closed()
    with pytest.raises(InterfaceError, match="Connection is closed"):
        stmt.execute({"id": 1})
