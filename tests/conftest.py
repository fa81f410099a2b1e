"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.config import settings
from app.core.security import create_access_token
from app.dependencies.services import NpsServices, build_memory_services
from app.integrations.mail.base import EmailMessage, EmailTransport
from app.main import create_app
from app.sockets.broadcast import Broadcaster

HOST_API_KEY = "test-host-key"
T0 = datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock; call it to read the time."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class RecordingTransport(EmailTransport):
    """Transport that remembers what it was asked to send."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> bool:
        self.sent.append(message)
        return self.succeed


class RaisingTransport(EmailTransport):
    async def send(self, message: EmailMessage) -> bool:
        raise ConnectionError("mail relay unreachable")


class RecordingBroadcaster(Broadcaster):
    def __init__(self):
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    async def broadcast(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        self.events.append((channel, event, payload))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def make_services(clock, broadcaster):
    """Factory for in-memory services sharing the test clock."""

    def _make(transport: EmailTransport | None = None, **kwargs) -> NpsServices:
        return build_memory_services(
            transport=transport,
            broadcaster=broadcaster,
            clock=clock,
            **kwargs,
        )

    return _make


@pytest.fixture
def services(make_services, transport) -> NpsServices:
    """In-memory services with default config."""
    return make_services(transport)


@pytest.fixture(params=["rejecting", "raising"])
def failing_transport(request) -> EmailTransport:
    """A transport that reports failure, or one that raises."""
    if request.param == "rejecting":
        return RecordingTransport(succeed=False)
    return RaisingTransport()


@pytest.fixture
def host_key(monkeypatch) -> str:
    monkeypatch.setattr(settings, "host_api_key", HOST_API_KEY)
    return HOST_API_KEY


@pytest.fixture
def host_headers(host_key) -> dict:
    return {"X-API-Key": host_key}


@pytest.fixture
def admin_headers() -> dict:
    token = create_access_token({
        "sub": "admin-1",
        "role": "admin",
        "email": "admin@test.com",
        "name": "Test Admin",
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def agent_headers() -> dict:
    token = create_access_token({"sub": "agent-1", "role": "agent"})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(scope="function")
async def client(services) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client over the in-memory services."""
    app = create_app(services)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def sample_ticket() -> dict:
    """Ticket payload as sent by the host on resolution."""
    return {
        "id": "T1",
        "contact_id": "C1",
        "assignee_id": "A1",
        "team_id": "support",
        "category": "billing",
    }
