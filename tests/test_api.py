"""Tests for the HTTP endpoints."""
import json

import httpx
import pytest
from conftest import completion_json, sse_body
from fastapi.testclient import TestClient

from facade.api import create_app
from facade.errors import ConfigurationError
from facade.llm import LLMProvider


def events(response: httpx.Response) -> list:
    parsed = []
    for line in response.text.splitlines():
        if line.startswith("data: "):
            payload = line[len("data: "):]
            parsed.append(payload if payload == "[DONE]" else json.loads(payload))
    return parsed


@pytest.fixture
def client_for(make_provider):
    """TestClient for an app whose provider is served by ``handler``."""
    clients = []

    def _client(handler) -> TestClient:
        client = TestClient(create_app(lambda: make_provider(handler)))
        clients.append(client.__enter__())
        return client

    yield _client

    for client in clients:
        client.__exit__(None, None, None)


REQUEST = {"messages": [{"role": "user", "content": "hi"}], "modelKey": "MOONSHOT_KIMI"}


def unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError("backend must not be called")


class TestModelsEndpoint:
    def test_lists_catalog(self, client_for):
        """Test listing the model catalog."""
        response = client_for(unreachable).get("/api/models")

        assert response.status_code == 200
        keys = [model["key"] for model in response.json()]
        assert keys == ["NOUS_DEEPHERMES", "MOONSHOT_KIMI"]


class TestChatEndpoint:
    """Tests for POST /api/chat."""

    def test_returns_thinking_and_response(self, client_for):
        """Test a completion returned as JSON."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=completion_json("<think>greet</think>Hello!"))

        response = client_for(handler).post("/api/chat", json=REQUEST)

        assert response.status_code == 200
        assert response.json() == {"response": "Hello!", "thinking": "greet"}

    def test_backend_failure(self, client_for):
        """Test that a backend failure is a 502."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": {"message": "upstream down"}})

        response = client_for(handler).post("/api/chat", json=REQUEST)

        assert response.status_code == 502
        assert "error" in response.json()

    @pytest.mark.parametrize(
        "body",
        [
            {"modelKey": "MOONSHOT_KIMI"},
            {"messages": "hi", "modelKey": "MOONSHOT_KIMI"},
            {"messages": [{"role": "user", "content": "hi"}]},
            {"messages": [{"role": "user", "content": "hi"}], "modelKey": "NOPE"},
            ["not", "an", "object"],
        ],
    )
    def test_invalid_requests(self, client_for, body):
        """Test that malformed bodies are a 400."""
        response = client_for(unreachable).post("/api/chat", json=body)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request")

    def test_unexpected_error_is_json_500(self):
        """Test that an error outside the FacadeError family still yields a JSON body."""

        class BrokenProvider(LLMProvider):
            async def complete(self, messages, model_key, system_prompt=None):
                raise RuntimeError("boom")

            async def stream_completion(self, messages, model_key, callbacks, cancel=None):
                raise RuntimeError("boom")

            async def close(self):
                pass

        with TestClient(create_app(BrokenProvider), raise_server_exceptions=False) as client:
            response = client.post("/api/chat", json=REQUEST)

        assert response.status_code == 500
        assert response.json() == {"error": "boom"}

    def test_invalid_json(self, client_for):
        """Test that an unparseable body is a 400."""
        response = client_for(unreachable).post(
            "/api/chat", content=b"{oops", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400


class TestStreamEndpoint:
    """Tests for POST /api/stream."""

    def test_streams_events(self, client_for):
        """Test the event stream for a streamed completion."""
        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content)["stream"] is True
            return httpx.Response(200, content=sse_body(["<think>", "x", "</think>", "Hi"]))

        response = client_for(handler).post("/api/stream", json=REQUEST)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"
        assert events(response) == [
            {"type": "token", "content": "<think>"},
            {"type": "token", "content": "x"},
            {"type": "token", "content": "</think>"},
            {"type": "thinking", "content": "x"},
            {"type": "token", "content": "Hi"},
            {"type": "complete", "content": "Hi"},
            "[DONE]",
        ]

    def test_backend_failure_is_error_event(self, client_for):
        """Test that a backend failure is sent as an error event."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"error": {"message": "rate limited"}})

        response = client_for(handler).post("/api/stream", json=REQUEST)

        assert response.status_code == 200
        parsed = events(response)
        assert len(parsed) == 1
        assert parsed[0]["type"] == "error"
        assert "429" in parsed[0]["error"]

    def test_invalid_request_is_rejected_before_streaming(self, client_for):
        """Test that validation happens before the stream opens."""
        response = client_for(unreachable).post("/api/stream", json={"messages": []})

        assert response.status_code == 400


class TestStartup:
    def test_missing_api_key_fails_startup(self, monkeypatch):
        """Test that startup fails without an API key."""
        monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)

        with pytest.raises(ConfigurationError):
            with TestClient(create_app()):
                pass
