"""Gemini client for the hosted generative-language API.

Responsibilities:
    - Configuration from environment (API key, model, sampling)
    - Conversation history truncation and role mapping
    - The single generateContent call and its error family

Maintains clean separation from the HTTP layer and the UI.
"""

from chatbot.gemini.client import (
    EmptyResponseError,
    GeminiAPIError,
    GeminiClient,
    GeminiConnectionError,
    GeminiError,
    InvalidResponseError,
    get_gemini_client,
)
from chatbot.gemini.config import (
    GeminiConfig,
    StreamConfig,
    get_gemini_config,
    get_stream_config,
)

__all__ = [
    "EmptyResponseError",
    "GeminiAPIError",
    "GeminiClient",
    "GeminiConfig",
    "GeminiConnectionError",
    "GeminiError",
    "InvalidResponseError",
    "StreamConfig",
    "get_gemini_client",
    "get_gemini_config",
    "get_stream_config",
]
