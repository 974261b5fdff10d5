"""Pytest configuration and shared fixtures."""
import json
import os

import httpx
import pytest

from facade.config import OpenRouterCredentials
from facade.llm import OpenRouterProvider
from facade.llm.models import ChatMessage, StreamCallbacks


def sse_line(content: str) -> str:
    """One upstream frame carrying a token delta."""
    return f"data: {json.dumps({'choices': [{'delta': {'content': content}}]})}\n"


def sse_body(tokens: list[str], done: bool = True) -> bytes:
    """A complete upstream stream body for the given tokens."""
    body = "".join(sse_line(token) for token in tokens)
    if done:
        body += "data: [DONE]\n"
    return body.encode()


def completion_json(content) -> dict:
    """A non-streamed chat.completion body with the given message content."""
    return {
        "id": "gen-1",
        "object": "chat.completion",
        "created": 0,
        "model": "nousresearch/deephermes-3-llama-3-8b-preview:free",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def scripted_source(chunks, fail_with: Exception | None = None):
    """Build a chunk source that yields ``chunks`` and optionally fails afterwards.

    The returned source records how it was called and whether it was closed.
    """
    calls = []
    closed = []

    async def source(messages, model):
        calls.append((messages, model))
        try:
            for chunk in chunks:
                yield chunk
            if fail_with is not None:
                raise fail_with
        finally:
            closed.append(True)

    source.calls = calls
    source.closed = closed
    return source


class CallbackRecorder:
    """Collects callback invocations in order."""

    def __init__(self):
        self.events: list[tuple[str, object]] = []

    def on_token(self, token):
        self.events.append(("token", token))

    def on_thinking(self, thinking):
        self.events.append(("thinking", thinking))

    def on_complete(self, response):
        self.events.append(("complete", response))

    def on_error(self, error):
        self.events.append(("error", error))

    def callbacks(self):
        return StreamCallbacks(
            on_token=self.on_token,
            on_thinking=self.on_thinking,
            on_complete=self.on_complete,
            on_error=self.on_error,
        )

    def of(self, kind: str) -> list:
        return [value for name, value in self.events if name == kind]


@pytest.fixture
def recorder():
    return CallbackRecorder()


@pytest.fixture
def credentials():
    """Fake credentials pointing at a local base URL."""
    return OpenRouterCredentials(
        api_key="sk-or-test",
        base_url="https://openrouter.test/api/v1",
        site_url="http://localhost:3000",
        site_name="Facade Tests",
    )


@pytest.fixture
def user_messages():
    return [ChatMessage(role="user", content="What is 2 + 2?")]


@pytest.fixture
def make_provider(credentials):
    """Create a provider whose streaming client is served by ``handler``."""
    def _make(handler):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return OpenRouterProvider(credentials, http_client=client)

    return _make


@pytest.fixture(scope="session")
def api_key():
    """Return the OpenRouter API key from the environment."""
    return os.getenv("OPENROUTER_API_KEY")
