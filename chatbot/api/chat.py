"""Chat endpoints: complete replies and simulated SSE streaming.

The Gemini API answers in one piece. ``/chat/stream`` replays that answer
as Server-Sent Events on a fixed timer so the page can reveal it gradually.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from chatbot.conversation.session import MEMORY_WINDOW
from chatbot.conversation.streaming import estimate_reveal_seconds, simulate_stream
from chatbot.gemini.client import GeminiClient, GeminiError, get_gemini_client
from chatbot.gemini.config import StreamConfig, get_stream_config
from chatbot.models.schemas import (
    ChatRequest,
    ChatResponse,
    ModelSettings,
    StreamChunk,
    StreamStatus,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def gemini_client() -> GeminiClient:
    """Resolve the shared Gemini client.

    Raises:
        HTTPException: 503 if the API key is not configured.
    """
    try:
        return get_gemini_client()
    except ValueError as e:
        logger.error(f"Gemini client unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Gemini API key is not configured",
        ) from e


def _sse(chunk: StreamChunk) -> str:
    return f"data: {chunk.model_dump_json()}\n\n"


@router.get("/settings", response_model=ModelSettings)
async def chat_settings(
    client: GeminiClient = Depends(gemini_client),
    stream_config: StreamConfig = Depends(get_stream_config),
) -> ModelSettings:
    """Return the non-secret model configuration for display."""
    config = client.config
    return ModelSettings(
        model=config.model_name,
        temperature=config.temperature,
        top_k=config.top_k,
        top_p=config.top_p,
        max_output_tokens=config.max_output_tokens,
        history_window=config.history_window,
        memory_window=MEMORY_WINDOW,
        stream_interval_ms=stream_config.interval_ms,
        stream_chunk_size=stream_config.chunk_size,
    )


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    client: GeminiClient = Depends(gemini_client),
) -> ChatResponse:
    """Get the complete reply for a message.

    Raises:
        502: The Gemini API failed or returned nothing.
    """
    try:
        text = await client.generate(request.message, request.history)
    except GeminiError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e

    return ChatResponse(response=text, model=client.config.model_name)


@router.post("/stream")
async def chat_stream(
    request: ChatRequest,
    client: GeminiClient = Depends(gemini_client),
    stream_config: StreamConfig = Depends(get_stream_config),
) -> StreamingResponse:
    """Stream a reply as Server-Sent Events.

    Emits ``received``, then ``generating`` once the reply is in, then the
    reply in small content chunks, then a final ``complete`` chunk with
    ``done=true``. A failure ends the stream with an ``error`` chunk instead.
    """

    async def event_stream() -> AsyncGenerator[str]:
        yield _sse(StreamChunk(content="", done=False, status=StreamStatus.RECEIVED))

        try:
            text = await client.generate(request.message, request.history)
        except GeminiError as e:
            yield _sse(
                StreamChunk(content="", done=True, status=StreamStatus.ERROR, error=str(e))
            )
            return

        seconds = estimate_reveal_seconds(text, stream_config.interval, stream_config.chunk_size)
        logger.debug(f"Revealing {len(text)} characters over {seconds:.1f}s")
        yield _sse(StreamChunk(content="", done=False, status=StreamStatus.GENERATING))

        async for piece in simulate_stream(
            text,
            interval=stream_config.interval,
            chunk_size=stream_config.chunk_size,
        ):
            yield _sse(StreamChunk(content=piece, done=False))

        yield _sse(StreamChunk(content="", done=True, status=StreamStatus.COMPLETE))

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
