"""Integration tests for SSE streaming chat endpoint.

Tests streaming behavior with httpx AsyncClient and ASGITransport against
the real FastAPI app. Only the remote Gemini endpoint is mocked.
"""

import json

from httpx import AsyncClient

from chatbot.models.schemas import StreamChunk, StreamStatus
from tests.conftest import GEMINI_REPLY, MockGemini


async def read_chunks(client: AsyncClient, payload: dict) -> list[StreamChunk]:
    chunks: list[StreamChunk] = []
    async with client.stream("POST", "/chat/stream", json=payload) as response:
        assert response.status_code == 200
        async for line in response.aiter_lines():
            if line.startswith("data: "):
                chunks.append(StreamChunk.model_validate_json(line.removeprefix("data: ")))
    return chunks


class TestStreamingEndpoint:
    """Integration tests for POST /chat/stream SSE endpoint."""

    async def test_stream_returns_sse_content_type(self, async_client: AsyncClient) -> None:
        """Streaming endpoint returns text/event-stream media type."""
        async with async_client.stream(
            "POST",
            "/chat/stream",
            json={"message": "Say hello"},
        ) as response:
            assert response.status_code == 200
            assert "text/event-stream" in response.headers["content-type"]

    async def test_chunks_are_valid_json(self, async_client: AsyncClient) -> None:
        """Each SSE data chunk contains valid JSON matching StreamChunk schema."""
        async with async_client.stream(
            "POST",
            "/chat/stream",
            json={"message": "Hi"},
        ) as response:
            async for line in response.aiter_lines():
                if line.startswith("data: "):
                    data = json.loads(line.removeprefix("data: ").strip())
                    chunk = StreamChunk.model_validate(data)
                    assert isinstance(chunk.content, str)
                    assert isinstance(chunk.done, bool)

    async def test_content_chunks_reassemble_reply(self, async_client: AsyncClient) -> None:
        """Concatenated content chunks equal the complete Gemini reply."""
        chunks = await read_chunks(async_client, {"message": "Hi"})

        content = "".join(c.content for c in chunks if not c.done)
        assert content == GEMINI_REPLY

    async def test_reply_is_revealed_in_small_chunks(self, async_client: AsyncClient) -> None:
        chunks = await read_chunks(async_client, {"message": "Hi"})

        content_chunks = [c for c in chunks if c.content]
        assert len(content_chunks) == -(-len(GEMINI_REPLY) // 5)
        assert all(len(c.content) <= 5 for c in content_chunks)

    async def test_status_sequence(self, async_client: AsyncClient) -> None:
        chunks = await read_chunks(async_client, {"message": "Hi"})

        statuses = [c.status for c in chunks if c.status is not None]
        assert statuses == [
            StreamStatus.RECEIVED,
            StreamStatus.GENERATING,
            StreamStatus.COMPLETE,
        ]

    async def test_final_chunk_has_done_true(self, async_client: AsyncClient) -> None:
        """Last chunk in stream has done=true to signal completion."""
        chunks = await read_chunks(async_client, {"message": "Say yes"})

        assert chunks[-1].done is True
        for chunk in chunks[:-1]:
            assert chunk.done is False, "Non-final chunks should have done=false"

    async def test_history_is_forwarded(
        self, async_client: AsyncClient, mock_gemini: MockGemini
    ) -> None:
        history = [
            {"role": "assistant", "content": "Welcome!"},
            {"role": "user", "content": "My name is Ada"},
            {"role": "assistant", "content": "Nice to meet you, Ada"},
        ]

        await read_chunks(async_client, {"message": "What is my name?", "history": history})

        contents = mock_gemini.last_payload["contents"]
        assert [turn["role"] for turn in contents] == ["model", "user", "model", "user"]
        assert contents[-1]["parts"][0]["text"] == "What is my name?"

    async def test_history_is_optional(self, async_client: AsyncClient) -> None:
        async with async_client.stream(
            "POST",
            "/chat/stream",
            json={"message": "Hello"},
        ) as response:
            assert response.status_code == 200

    async def test_empty_message_returns_422(self, async_client: AsyncClient) -> None:
        """Empty message triggers validation error with 422 status."""
        response = await async_client.post("/chat/stream", json={"message": ""})

        assert response.status_code == 422
        assert "detail" in response.json()

    async def test_missing_message_returns_422(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/chat/stream", json={})

        assert response.status_code == 422

    async def test_invalid_history_role_returns_422(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/chat/stream",
            json={"message": "Hi", "history": [{"role": "system", "content": "x"}]},
        )

        assert response.status_code == 422


class TestStreamingErrorHandling:
    """Tests for error scenarios in streaming endpoint."""

    async def test_upstream_error_ends_with_error_chunk(
        self, async_client: AsyncClient, mock_gemini: MockGemini
    ) -> None:
        mock_gemini.status_code = 429
        mock_gemini.body = {"error": {"message": "Resource has been exhausted"}}

        chunks = await read_chunks(async_client, {"message": "Hi"})

        final = chunks[-1]
        assert final.done is True
        assert final.status == StreamStatus.ERROR
        assert final.error == "HTTP error! status: 429 - Resource has been exhausted"
        assert not any(c.content for c in chunks)

    async def test_empty_reply_ends_with_error_chunk(
        self, async_client: AsyncClient, mock_gemini: MockGemini
    ) -> None:
        mock_gemini.body = {"candidates": []}

        chunks = await read_chunks(async_client, {"message": "Hi"})

        assert chunks[-1].error == "No response from AI assistant"

    async def test_non_json_reply_ends_with_error_chunk(
        self, async_client: AsyncClient, mock_gemini: MockGemini
    ) -> None:
        mock_gemini.raw = b"<html>Bad gateway</html>"

        chunks = await read_chunks(async_client, {"message": "Hi"})

        final = chunks[-1]
        assert final.done is True
        assert final.status == StreamStatus.ERROR
        assert final.error == "Invalid response from AI assistant"

    async def test_null_candidate_content_ends_with_error_chunk(
        self, async_client: AsyncClient, mock_gemini: MockGemini
    ) -> None:
        mock_gemini.body = {"candidates": [{"content": None}]}

        chunks = await read_chunks(async_client, {"message": "Hi"})

        assert chunks[-1].done is True
        assert chunks[-1].error == "No response from AI assistant"

    async def test_whitespace_only_message_returns_422(self, async_client: AsyncClient) -> None:
        """Whitespace-only message is rejected as empty."""
        response = await async_client.post("/chat/stream", json={"message": "   "})

        assert response.status_code == 422

    async def test_wrong_http_method_returns_405(self, async_client: AsyncClient) -> None:
        """GET request to POST endpoint returns 405 Method Not Allowed."""
        response = await async_client.get("/chat/stream")

        assert response.status_code == 405

    async def test_cors_headers_present(self, async_client: AsyncClient) -> None:
        """Response includes CORS headers for cross-origin requests."""
        async with async_client.stream(
            "POST",
            "/chat/stream",
            json={"message": "test"},
            headers={"Origin": "http://localhost:3000"},
        ) as response:
            assert "access-control-allow-origin" in response.headers
