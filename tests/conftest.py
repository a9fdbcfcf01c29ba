"""Shared test fixtures and dummy classes."""

from __future__ import annotations

from typing import Any, Callable, Union

import pytest

from servereye_helper import auth
from servereye_helper.api import ServerEyeClient
from servereye_helper.auth import Credential
from servereye_helper.cache import EntityCache

BASE_URL = "https://api.test/2"


class DummyChat:
    """Dummy Telegram chat for testing."""

    def __init__(self, chat_id: int) -> None:
        self.id = chat_id
        self.type = "private"
        self.sent: list[str] = []

    async def send_message(self, text: str) -> None:
        self.sent.append(text)


class DummyUser:
    """Dummy Telegram user for testing."""

    def __init__(self, user_id: int, username: str | None = None) -> None:
        self.id = user_id
        self.username = username


class DummyMessage:
    """Dummy Telegram message for testing."""

    def __init__(self) -> None:
        self.replies: list[str] = []

    async def reply_text(self, text: str, **_: Any) -> None:
        self.replies.append(text)


class DummyUpdate:
    """Dummy Telegram update for testing."""

    def __init__(self, chat_id: int, user_id: int) -> None:
        self.effective_chat = DummyChat(chat_id)
        self.effective_user = DummyUser(user_id)
        self.message = DummyMessage()
        self.effective_message = self.message


class DummyApplication:
    """Dummy Telegram application for testing."""

    def __init__(self) -> None:
        self.bot_data: dict[str, object] = {}


class DummyContext:
    """Dummy Telegram context for testing."""

    def __init__(self, args: list[str] | None = None) -> None:
        self.args = args or []
        self.application = DummyApplication()


class DummyResponse:
    """Dummy HTTP response for testing."""

    def __init__(
        self,
        data: object,
        status: int = 200,
        text: str = "",
        cookies: dict[str, str] | None = None,
    ) -> None:
        self._data = data
        self.status_code = status
        self.text = text or str(data)
        self.ok = 200 <= status < 300
        self.cookies = cookies or {}

    def json(self) -> object:
        return self._data


Route = Union[DummyResponse, Callable[..., DummyResponse]]


class FakeSession:
    """Stand-in for ``requests.Session`` routing by (method, path)."""

    def __init__(self, routes: dict[tuple[str, str], Route]) -> None:
        self.routes = routes
        self.calls: list[tuple[str, str]] = []
        self.kwargs: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> DummyResponse:
        path = url[len(BASE_URL) :] if url.startswith(BASE_URL) else url
        self.calls.append((method, path))
        self.kwargs.append(kwargs)
        route = self.routes.get((method, path))
        if route is None:
            return DummyResponse({"message": "not found"}, status=404)
        if callable(route):
            return route(**kwargs)
        return route

    def count(self, path: str, method: str = "GET") -> int:
        return self.calls.count((method, path))


CUSTOMER = {"cId": "cu1", "companyName": "Acme GmbH", "customerNumberExtern": "10042"}
CONNECTOR = {"cId": "occ1", "name": "Acme OCC", "customerId": "cu1"}
SENSORHUB = {
    "cId": "hub1",
    "name": "SRV01",
    "parentId": "occ1",
    "customerId": "cu1",
    "machineName": "srv01.acme.local",
    "osName": "Windows Server 2022",
}
AGENT_DISK = {
    "aId": "a1",
    "parentId": "hub1",
    "name": "Disk C:",
    "type": "DiskSpace",
    "interval": 5,
}
AGENT_PING = {
    "aId": "a2",
    "parentId": "hub1",
    "name": "Ping",
    "type": "Ping",
    "interval": 1,
    "free": True,
}
DISK_MESSAGE = "Disk C: is almost full\nfree: 2 GB\nused: 98 GB\nthreshold: 5 GB"


def make_routes() -> dict[tuple[str, str], Route]:
    return {
        ("GET", "/me"): DummyResponse({"email": "ops@acme.de"}),
        ("GET", "/me/nodes"): DummyResponse(
            [
                {"id": "cu1", "type": 0, "name": "Acme GmbH"},
                {"id": "occ1", "type": 1, "name": "Acme OCC", "customerId": "cu1"},
                {"id": "hub1", "type": 2, "name": "SRV01", "customerId": "cu1"},
                {"id": "a1", "type": 3, "name": "Disk C:"},
                {"id": "a2", "type": 3, "name": "Ping"},
            ]
        ),
        ("GET", "/customer/cu1"): DummyResponse(CUSTOMER),
        ("GET", "/container/occ1"): DummyResponse(CONNECTOR),
        ("GET", "/container/hub1"): DummyResponse(SENSORHUB),
        ("GET", "/container/hub1/agents"): DummyResponse([AGENT_DISK, AGENT_PING]),
        ("GET", "/agent/a1"): DummyResponse(AGENT_DISK),
        ("GET", "/agent/a2"): DummyResponse(AGENT_PING),
        ("GET", "/agent/a1/state"): DummyResponse(
            [{"state": True, "message": DISK_MESSAGE, "lastDate": "2026-10-01T10:00:00Z"}]
        ),
        ("GET", "/agent/a2/state"): DummyResponse(
            [{"state": False, "message": "Ping ok", "lastDate": "2026-10-01T10:01:00Z"}]
        ),
        ("GET", "/agent/a1/notification"): DummyResponse(
            [
                {
                    "nId": "n1",
                    "useremail": "olga@acme.de",
                    "prename": "Olga",
                    "surname": "Ops",
                    "mail": True,
                    "phone": False,
                    "ticket": True,
                    "deferId": "dt1",
                }
            ]
        ),
        ("GET", "/agent/a2/notification"): DummyResponse([]),
        ("GET", "/container/hub1/notification"): DummyResponse(
            [{"nId": "n9", "useremail": "night@acme.de", "phone": True}]
        ),
        ("GET", "/container/hub1/state"): DummyResponse(
            [{"state": False, "message": "Sensorhub online\nuptime 4 days"}]
        ),
        ("GET", "/customer/cu1/dispatchTime"): DummyResponse(
            [{"dtId": "dt1", "name": "15 minutes", "defer": 15}]
        ),
    }


@pytest.fixture
def session() -> FakeSession:
    return FakeSession(make_routes())


@pytest.fixture
def client(session: FakeSession) -> ServerEyeClient:
    return ServerEyeClient(
        base_url=BASE_URL, timeout=1, max_retries=0, retry_delay=0, session=session
    )


@pytest.fixture
def credential() -> Credential:
    return Credential(api_key="test-key")


@pytest.fixture
def cache(client: ServerEyeClient) -> EntityCache:
    return EntityCache(client)


@pytest.fixture(autouse=True)
def _no_global_session():
    auth.disconnect()
    yield
    auth.disconnect()
