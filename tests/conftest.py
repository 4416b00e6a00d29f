# tests/conftest.py

import pytest
from fastapi.testclient import TestClient

import app.main as main
from app.services.generation_service import GenerationService


class FakeCompletionClient:
    """Stands in for CompletionClient: records messages, replays errors, then replies."""

    def __init__(self, reply="function add(a,b){return a+b;}", errors=None):
        self.reply = reply
        self.errors = list(errors or [])
        self.calls = []

    def complete(self, messages):
        self.calls.append(list(messages))
        if self.errors:
            raise self.errors.pop(0)
        return self.reply


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def make_service(fake_client):
    def _make(api_key="sk-test", **kwargs):
        kwargs.setdefault("retry_delay", 0)
        kwargs.setdefault("client_factory", lambda **_: fake_client)
        return GenerationService(api_key=api_key, **kwargs)
    return _make


@pytest.fixture
def api(monkeypatch, make_service):
    """TestClient whose app uses a GenerationService backed by fake_client."""
    monkeypatch.setattr(main, "generation_service", make_service())
    return TestClient(main.app)
