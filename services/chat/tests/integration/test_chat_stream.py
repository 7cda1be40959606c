# services/chat/tests/integration/test_chat_stream.py
# End-to-end tests of the streaming chat endpoint

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from chat.app import create_app
from chat.config import LLMSettings
from chat.exceptions import ProviderError
from chat.models import ModelReply, ToolCallRequest
from chat.orchestrator import ChatOrchestrator
from chat.providers.ollama import OllamaProvider
from fastapi.testclient import TestClient
from helpers import FakeProvider, frame_types, parse_frames


def stream_frames(client, payload):
    """POST to /api/chat and decode frames as they arrive."""
    with client.stream("POST", "/api/chat", json=payload) as response:
        assert response.status_code == 200
        return [json.loads(line) for line in response.iter_lines() if line]


@pytest.mark.integration
class TestChatStreaming:
    """Streaming behaviour of POST /api/chat."""

    def test_direct_answer(self, client):
        frames = stream_frames(client, {"message": "Hello", "conversation_history": []})

        assert frames == [
            {"type": "thinking", "content": "Processing..."},
            {"type": "content", "content": "Hello! How can I help you today?"},
            {"type": "complete"},
        ]

    def test_streaming_headers(self, client):
        with client.stream("POST", "/api/chat", json={"message": "Hello"}) as response:
            assert response.headers["content-type"].startswith("text/plain")
            assert response.headers["cache-control"] == "no-cache"
            assert response.headers["x-accel-buffering"] == "no"
            assert "x-correlation-id" in response.headers

    def test_weather_tool_round_trip(self, make_client, users_client):
        client = make_client(
            text="",
            tool_calls=[ToolCallRequest(name="getWeatherData", args={"city": "Kolkata"})],
        )

        frames = stream_frames(client, {"message": "What's the weather in Kolkata?"})

        assert frame_types(frames) == [
            "thinking",
            "function_call",
            "function_call",
            "content",
            "complete",
        ]
        assert frames[1] == {
            "type": "function_call",
            "function": "getWeatherData",
            "args": {"city": "Kolkata"},
            "status": "executing",
        }
        assert frames[2]["status"] == "completed"
        assert frames[2]["result"] == {"temp": "37c"}
        assert '{"temp": "37c"}' in frames[3]["content"]
        users_client.get_weather.assert_awaited_once_with("Kolkata")

    def test_delete_with_bad_token(self, make_client):
        client = make_client(
            tool_calls=[
                ToolCallRequest(
                    name="deleteUserlData",
                    args={"email": "asha@example.com", "token": "wrong"},
                )
            ]
        )

        frames = stream_frames(client, {"message": "Delete asha@example.com"})

        assert frame_types(frames) == [
            "thinking",
            "function_call",
            "function_call",
            "content",
            "complete",
        ]
        assert frames[2]["status"] == "error"
        assert "401" in frames[2]["error"]
        assert frames[3]["content"].startswith("Error during deleteUserlData:")

    def test_unknown_tool_frames(self, make_client):
        client = make_client(
            tool_calls=[ToolCallRequest(name="getStockPrice", args={"ticker": "X"})]
        )

        frames = stream_frames(client, {"message": "stock price?"})

        assert frames[2] == {
            "type": "function_call",
            "function": "getStockPrice",
            "status": "error",
            "error": "Unknown tool: getStockPrice",
        }
        assert frames[-1] == {"type": "complete"}

    def test_failed_call_then_successful_call(self, make_client, users_client):
        client = make_client(
            tool_calls=[
                ToolCallRequest(
                    name="deleteUserlData",
                    args={"email": "asha@example.com", "token": "wrong"},
                ),
                ToolCallRequest(name="getWeatherData", args={"city": "Kolkata"}),
            ]
        )

        frames = stream_frames(client, {"message": "Delete Asha, then weather in Kolkata"})

        calls = [
            (f["function"], f["status"]) for f in frames if f["type"] == "function_call"
        ]
        assert calls == [
            ("deleteUserlData", "executing"),
            ("deleteUserlData", "error"),
            ("getWeatherData", "executing"),
            ("getWeatherData", "completed"),
        ]
        assert frame_types(frames) == [
            "thinking",
            "function_call",
            "function_call",
            "content",
            "function_call",
            "function_call",
            "content",
            "complete",
        ]
        users_client.get_weather.assert_awaited_once_with("Kolkata")

    def test_provider_error_frame(self, make_client, registry):
        client = make_client(
            FakeProvider(registry, replies=[ProviderError("Fake API error: quota exceeded")])
        )

        frames = stream_frames(client, {"message": "hi"})

        assert frames == [
            {"type": "thinking", "content": "Processing..."},
            {"type": "error", "message": "Fake API error: quota exceeded"},
        ]

    def test_history_reaches_provider(self, make_client, registry):
        provider = FakeProvider(registry)
        client = make_client(provider)
        history = [
            {"type": "user", "content": "hi", "timestamp": "2024-05-01T10:00:00Z"},
            {"type": "assistant", "content": "hello"},
        ]

        stream_frames(client, {"message": "again", "conversation_history": history})

        turns = provider.calls[0]["turns"]
        assert [(t.role.value, t.content) for t in turns] == [
            ("user", "hi"),
            ("assistant", "hello"),
            ("user", "again"),
        ]

    def test_identical_requests_identical_bodies(self, make_client):
        client = make_client(
            tool_calls=[
                ToolCallRequest(name="getLoctionWiseUserData", args={"city": "kolkata"})
            ]
        )
        payload = {"message": "Who lives in Kolkata?", "conversation_history": []}

        first = client.post("/api/chat", json=payload)
        second = client.post("/api/chat", json=payload)

        assert first.content == second.content
        assert frame_types(parse_frames(first.content))[-1] == "complete"


@pytest.mark.integration
class TestChatValidation:
    """Request validation of POST /api/chat."""

    def test_missing_message(self, client):
        response = client.post("/api/chat", json={"conversation_history": []})

        assert response.status_code == 422

    def test_blank_message(self, client):
        response = client.post("/api/chat", json={"message": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "GuardrailViolation"

    def test_too_long_message(self, client, chat_config):
        response = client.post(
            "/api/chat", json={"message": "x" * (chat_config.max_message_length + 1)}
        )

        assert response.status_code == 400
        assert "too long" in response.json()["detail"]

    def test_malformed_history(self, client):
        response = client.post(
            "/api/chat",
            json={"message": "hi", "conversation_history": [{"content": "no role"}]},
        )

        assert response.status_code == 422


@pytest.mark.integration
class TestHealth:
    """GET /api/health."""

    def test_healthy(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "provider": "fake",
            "model": "fake-model",
        }

    @pytest.fixture
    def ollama_provider(self, registry):
        provider = OllamaProvider(
            LLMSettings(provider="ollama", model="qwen3:4b"), registry
        )
        provider._client = MagicMock()
        provider._client.list = AsyncMock()
        return provider

    def test_ollama_healthy(self, make_client, ollama_provider):
        ollama_provider._client.list.return_value = MagicMock(
            models=[MagicMock(model="qwen3:4b")]
        )
        client = make_client(ollama_provider)

        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "ollama_url": "http://localhost:11434",
            "ollama_model": "qwen3:4b",
            "available_models": ["qwen3:4b"],
        }

    def test_ollama_unreachable(self, make_client, ollama_provider):
        ollama_provider._client.list.side_effect = ConnectionError("connection refused")
        client = make_client(ollama_provider)

        response = client.get("/api/health")

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "unhealthy"
        assert "connection refused" in body["error"]
        assert body["ollama_url"] == "http://localhost:11434"


@pytest.mark.integration
class TestLifecycle:
    def test_provider_closed_on_shutdown(self, chat_config, registry):
        provider = FakeProvider(registry)
        app = create_app(chat_config, ChatOrchestrator(provider, registry))

        with TestClient(app) as client:
            client.get("/api/health")

        assert provider.closed is True

    def test_default_wiring_uses_configured_provider(self, chat_config):
        app = create_app(chat_config)

        assert isinstance(app.state.orchestrator.provider, OllamaProvider)
        assert len(app.state.orchestrator.registry) == 3
        assert app.state.users_client.base_url == "http://users.test"

    def test_follow_up_reply_is_streamed(self, make_client, registry):
        provider = FakeProvider(
            registry,
            replies=[
                ModelReply(
                    tool_calls=[ToolCallRequest(name="getWeatherData", args={"city": "Paris"})]
                ),
                ModelReply(text="It is 50c in Paris right now."),
            ],
        )
        client = make_client(provider)

        frames = stream_frames(client, {"message": "weather in Paris"})

        assert {"type": "content", "content": "It is 50c in Paris right now."} in frames
