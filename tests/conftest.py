"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - gemini_config: Config with a fake API key and a test model name
    - mock_gemini: Stand-in for the remote generateContent endpoint
    - gemini_client: Real GeminiClient wired to mock_gemini
    - app: FastAPI app with the Gemini client and stream pacing overridden
    - async_client: HTTPX client for API testing

No test talks to the real Gemini API.
"""

import json
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from chatbot.api.app import create_app
from chatbot.api.chat import gemini_client as gemini_client_dependency
from chatbot.gemini.client import GeminiClient
from chatbot.gemini.config import GeminiConfig, StreamConfig, get_stream_config

GEMINI_REPLY = "Hello there!\nHow can I help you today?"


def gemini_body(text: str) -> dict[str, Any]:
    """Build a generateContent response body carrying ``text``."""
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}
        ]
    }


class MockGemini:
    """Callable handler for ``httpx.MockTransport``.

    Records every request and answers with ``status_code`` and ``body``
    (or the undecoded ``raw`` bytes when set), or raises ``exc`` when set.
    """

    def __init__(self) -> None:
        self.status_code = 200
        self.body: Any = gemini_body(GEMINI_REPLY)
        self.raw: bytes | None = None
        self.exc: Exception | None = None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def gemini_config() -> GeminiConfig:
    """Return config with a fake key and a predictable model name."""
    return GeminiConfig(api_key="test-key", model_name="gemini-test")


@pytest.fixture
def mock_gemini() -> MockGemini:
    return MockGemini()


@pytest.fixture
async def gemini_client(
    gemini_config: GeminiConfig, mock_gemini: MockGemini
) -> AsyncGenerator[GeminiClient]:
    """Yield a GeminiClient whose HTTP traffic goes to mock_gemini."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(mock_gemini))
    client = GeminiClient(config=gemini_config, http_client=http)
    yield client
    await client.aclose()


@pytest.fixture
def stream_config() -> StreamConfig:
    """Reveal five characters per chunk without delay."""
    return StreamConfig(interval_ms=0, chunk_size=5)


@pytest.fixture
def app(gemini_client: GeminiClient, stream_config: StreamConfig) -> FastAPI:
    application = create_app()
    application.dependency_overrides[gemini_client_dependency] = lambda: gemini_client
    application.dependency_overrides[get_stream_config] = lambda: stream_config
    return application


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
