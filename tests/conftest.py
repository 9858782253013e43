"""Pytest configuration and shared fixtures: in-memory database, ASGI client and mocked AI providers."""
from typing import Callable

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import prepbuddy.models  # noqa: F401  (registers every table on Base.metadata)
from prepbuddy.api.deps import get_relay
from prepbuddy.db.base import Base
from prepbuddy.db.session import get_db
from prepbuddy.main import app
from prepbuddy.services.ai.openai_compatible import OpenAICompatibleProvider
from prepbuddy.services.ai.relay import ChatRelay

Handler = Callable[[httpx.Request], httpx.Response]

BASE_URL = "http://testserver"


def completion_body(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def make_provider(provider_id: str, handler: Handler, history_limit: int = 10, **extra) -> OpenAICompatibleProvider:
    """Provider whose network is the given MockTransport handler."""
    return OpenAICompatibleProvider(
        provider_id=provider_id,
        api_url=f"https://{provider_id}.test/v1/chat/completions",
        api_key="test-key",
        model="test-model",
        history_limit=history_limit,
        extra_params=extra or None,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def relay_providers():
    """Provider chain the API uses. Default: both tiers unreachable. Tests replace the list contents."""
    return [make_provider("openai", unreachable), make_provider("groq", unreachable, history_limit=8)]


@pytest.fixture
def api(session_factory, relay_providers):
    """The app with the test database and mocked provider chain wired in."""

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_relay] = lambda: ChatRelay(relay_providers, word_delay=0)
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(api):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=api), base_url=BASE_URL) as c:
        yield c


@pytest.fixture
def sent_emails(monkeypatch):
    """Record emails instead of sending them."""
    from prepbuddy.services import email_notify

    sent: list[tuple] = []

    def _send(to_email, subject, text, html):
        sent.append((to_email, subject))
        return True

    monkeypatch.setattr(email_notify, "_send", _send)
    return sent
