# services/chat/tests/integration/conftest.py
# Integration fixtures: the real app wired to a scripted provider

import pytest
from chat.app import create_app
from chat.orchestrator import ChatOrchestrator
from fastapi.testclient import TestClient
from helpers import FakeProvider


@pytest.fixture
def make_client(chat_config, registry):
    """Build a TestClient around an app whose provider is scripted by the test."""
    clients = []

    def _make(provider=None, **provider_kwargs):
        provider = provider or FakeProvider(registry, **provider_kwargs)
        orchestrator = ChatOrchestrator(
            provider, registry, provider_timeout=chat_config.provider_timeout
        )
        client = TestClient(create_app(chat_config, orchestrator))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()
