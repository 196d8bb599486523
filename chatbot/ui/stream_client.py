"""Consumer for the ``/chat/stream`` Server-Sent Events endpoint."""

import json
import logging
import os
from collections.abc import Callable, Sequence

import httpx

from chatbot.models.schemas import HistoryEntry

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


async def stream_chat_response(
    message: str,
    history: Sequence[HistoryEntry],
    on_chunk: Callable[[str], None],
    on_status: Callable[[str], None],
    on_complete: Callable[[], None],
    on_error: Callable[[str], None],
    *,
    client: httpx.AsyncClient | None = None,
    base_url: str = API_BASE_URL,
) -> None:
    """Consume SSE stream from /chat/stream endpoint.

    Cancelling the awaiting task closes the response and propagates; it is
    never reported through ``on_error``.
    """
    payload = {
        "message": message,
        "history": [entry.model_dump(mode="json") for entry in history],
    }

    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=120.0)
    try:
        async with http.stream(
            "POST",
            f"{base_url}/chat/stream",
            json=payload,
            headers={"Accept": "text/event-stream"},
        ) as response:
            response.raise_for_status()
            async for line in response.aiter_lines():
                if not line.startswith("data: "):
                    continue
                data = json.loads(line[6:])
                if data.get("error"):
                    on_error(data["error"])
                    return
                if data.get("done"):
                    on_complete()
                    return
                if status := data.get("status"):
                    on_status(status)
                if content := data.get("content"):
                    on_chunk(content)
        on_error("Stream ended unexpectedly")
    except httpx.HTTPStatusError as e:
        logger.error(f"Chat stream failed with HTTP {e.response.status_code}")
        on_error(f"HTTP {e.response.status_code}")
    except httpx.RequestError as e:
        logger.error(f"Chat stream connection failed: {e!r}")
        on_error(f"Connection failed: {e}")
    finally:
        if owns_client:
            await http.aclose()
