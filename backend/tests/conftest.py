"""Shared pytest fixtures for the LocaLink test suite.

Provides:
- In-memory async SQLite database (fresh per test)
- AsyncSession factory
- FastAPI test client (httpx.AsyncClient over ASGITransport)
- A fake automation platform behind httpx.MockTransport
- Auth helpers (JWT tokens)
"""

import json
import os
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Override settings BEFORE any app imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret-key-not-for-production")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("AUTOMATION_WEBHOOK_URL", "http://automation.test/webhook/dashboard")
os.environ.setdefault("CHAT_WEBHOOK_URL", "http://automation.test/webhook/chat")

from db.base import Base  # noqa: E402
from core import metrics  # noqa: E402
from core.security import Actor, create_access_token  # noqa: E402

TEST_USER_ID = "8d3c1f0e-4b7a-4c1e-9a52-1f6f2f0c9b11"
TEST_USER_EMAIL = "owner@example.com"


# ---------------------------------------------------------------------------
# Fake automation platform
# ---------------------------------------------------------------------------

class FakeAutomation:
    """Records outbound webhook calls and answers them.

    mode:
        "ok"             primary attempt succeeds
        "primary_fails"  primary gets HTTP 500, fallback succeeds
        "down"           every request fails at the transport level
    """

    def __init__(self):
        self.mode = "ok"
        self.reply: dict = {"response": "Thanks for reaching out!"}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.mode == "down":
            raise httpx.ConnectError("Connection refused", request=request)
        is_primary = request.headers.get("accept") == "application/json"
        if self.mode == "primary_fails" and is_primary:
            return httpx.Response(500, text="workflow crashed")
        return httpx.Response(200, json=self.reply)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def automation() -> FakeAutomation:
    return FakeAutomation()


@pytest.fixture
def notification_manager(automation):
    """Notification manager whose channel talks to the fake automation platform."""
    from notifications.channels import AutomationWebhookChannel
    from notifications.manager import NotificationManager, set_notification_manager

    manager = NotificationManager(
        AutomationWebhookChannel(
            url="http://automation.test/webhook/dashboard",
            timeout=1.0,
            transport=automation.transport,
        )
    )
    set_notification_manager(manager)
    yield manager
    set_notification_manager(None)


@pytest.fixture(autouse=True)
def clean_metrics():
    metrics.reset()
    yield


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory database for each test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    # Import all models so Base.metadata knows about them
    import db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    async_session_factory = sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with async_session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# App / HTTP client fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def app(db_engine, automation, notification_manager):
    """Create a FastAPI app instance wired to the test database and fake automation."""
    import db.database as db_mod
    from app.dependencies import get_chat_service, get_notifier
    from notifications.channels import AutomationWebhookChannel
    from services.chat_service import ChatService

    original_engine = db_mod.engine
    original_session = db_mod.AsyncSessionLocal

    db_mod.engine = db_engine
    db_mod.AsyncSessionLocal = sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    from app.main import create_app
    test_app = create_app()

    test_app.dependency_overrides[get_notifier] = lambda: notification_manager
    test_app.dependency_overrides[get_chat_service] = lambda: ChatService(
        AutomationWebhookChannel(
            url="http://automation.test/webhook/chat",
            timeout=1.0,
            transport=automation.transport,
        )
    )

    yield test_app

    # Restore originals
    test_app.dependency_overrides.clear()
    db_mod.engine = original_engine
    db_mod.AsyncSessionLocal = original_session


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Auth fixtures
# ---------------------------------------------------------------------------

def _bearer_for(user_id: str, email: str) -> dict:
    token = create_access_token(user_id=user_id, email=email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_actor() -> Actor:
    return Actor(id=TEST_USER_ID, email=TEST_USER_EMAIL)


@pytest.fixture
def auth_headers(test_actor) -> dict:
    """Authorization headers with a valid JWT for the test user."""
    return _bearer_for(test_actor.id, test_actor.email)


@pytest.fixture
def make_auth_headers():
    """Mint headers for another user."""
    return _bearer_for


@pytest.fixture
def automation_headers() -> dict:
    """What the automation platform sends on relay writes (any bearer value)."""
    return {"Authorization": "Bearer n8n-anon-key"}


@pytest.fixture
def sample_image() -> str:
    """A base64 string comfortably over the image threshold."""
    return "iVBORw0KGgo" + "A" * 400
