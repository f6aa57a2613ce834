from typing import Any, Generator, Iterator
from urllib.parse import parse_qs

import httpx
import pytest

from awqlduck import Connection, Connector, Cursor

ACCOUNT = "123-456-7890"
DEVELOPER_TOKEN = "dEve1op3er7okeN"
DSN = f"adwords?adwords_id={ACCOUNT}&access_token=ya29.static&developer_token={DEVELOPER_TOKEN}"

REPORT_CSV = (
    "Campaign ID,Campaign,Impressions,CTR,Max. CPC\n"
    '1001,Brand,"12,345",4.50%,auto\n'
    "1002,Generic,980,< 10%,auto: 150000\n"
    "1003,Display, --,> 90%,Excluded\n"
)


class FakeAdWords:
    """Stands in for the report download service and the OAuth endpoint."""

    def __init__(self, body: str = REPORT_CSV) -> None:
        self.body = body
        self.status_code = 200
        self.requests: list[httpx.Request] = []
        self.token_requests: list[httpx.Request] = []
        self.token_status_code = 200
        self.expires_in = 3600

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "oauth2.googleapis.com":
            self.token_requests.append(request)
            if self.token_status_code != 200:
                return httpx.Response(self.token_status_code, json={"error": "invalid_grant"})
            return httpx.Response(
                200,
                json={
                    "access_token": f"ya29.fresh{len(self.token_requests)}",
                    "expires_in": self.expires_in,
                    "token_type": "Bearer",
                },
            )
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.body)

    @staticmethod
    def form(request: httpx.Request) -> dict[str, Any]:
        return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


@pytest.fixture
def service() -> FakeAdWords:
    return FakeAdWords()


@pytest.fixture
def connector(service: FakeAdWords) -> Iterator[Connector]:
    connector = Connector(transport=httpx.MockTransport(service))
    yield connector
    connector.close()


@pytest.fixture
def conn(connector: Connector) -> Generator[Connection, Any, None]:
    with connector.connect(DSN) as conn:
        yield conn


@pytest.fixture
def cursor(conn: Connection) -> Iterator[Cursor]:
    with conn.cursor() as cur:
        yield cur


class FakeClock:
    def __init__(self, now: float = 1_500_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
