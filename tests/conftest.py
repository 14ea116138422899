"""Shared fixtures: an isolated app per test, backed by a temporary SQLite
database and a fake OpenAI-compatible client."""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from xtermux.database.config.config import Settings
from xtermux.main import create_app

ADMIN_EMAIL = "root@xtermux.dev"


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def model_dump(self):
        return self.payload


class FakeCompletions:
    """Stands in for ``client.chat.completions`` and records every call."""

    def __init__(self):
        self.calls = []
        self.reply = "Hello from the fake provider"
        self.error = None
        self.stream_chunks = ["Hel", "lo", "!"]

    async def create(self, **params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        if params.get("stream"):
            return self._stream()
        return FakeResponse(
            {
                "id": "chatcmpl-test",
                "object": "chat.completion",
                "model": params["model"],
                "choices": [
                    {
                        "index": 0,
                        "message": {"role": "assistant", "content": self.reply},
                        "finish_reason": "stop",
                    }
                ],
            }
        )

    async def _stream(self):
        for piece in self.stream_chunks:
            if isinstance(piece, Exception):
                raise piece
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=piece))])


class FakeAIClient:
    def __init__(self):
        self.chat = SimpleNamespace(completions=FakeCompletions())


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DB_DRIVER_NAME="sqlite",
        DB_DATABASE_NAME=str(tmp_path / "xtermux-test.db"),
        ADMIN_EMAILS=[ADMIN_EMAIL],
        INIT_MODE="test",
        AI_INTEGRATIONS_OPENAI_API_KEY="",
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def fake_ai():
    return FakeAIClient()


@pytest.fixture
def completions(fake_ai):
    return fake_ai.chat.completions


@pytest.fixture
def client(settings, fake_ai):
    """Test client for a fresh app; entering it runs the lifespan."""
    with TestClient(create_app(settings, ai_client=fake_ai)) as test_client:
        yield test_client


def register(client, username, email, password="secret123"):
    response = client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def login(client, email, password="secret123"):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    register(client, "alice", "alice@xtermux.dev")
    return login(client, "alice@xtermux.dev")


@pytest.fixture
def other_headers(client):
    register(client, "bob", "bob@xtermux.dev")
    return login(client, "bob@xtermux.dev")


@pytest.fixture
def admin_headers(client):
    register(client, "root", ADMIN_EMAIL)
    return login(client, ADMIN_EMAIL)
