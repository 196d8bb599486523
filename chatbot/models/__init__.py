"""Pydantic models for conversation state and API payloads.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Message: A single rendered chat message
    - ChatMemory: Recent-history window plus user preferences
    - ChatRequest: Incoming chat request payload
    - ChatResponse: Complete (non-streamed) assistant reply
    - StreamChunk: One Server-Sent Event of a simulated stream
    - ConversationStats: Derived counters for the stats panel
    - ModelSettings: Non-secret model configuration for display
"""

from chatbot.models.schemas import (
    ChatMemory,
    ChatRequest,
    ChatResponse,
    ChatState,
    CommunicationStyle,
    ConversationStats,
    HistoryEntry,
    Message,
    ModelSettings,
    Role,
    StreamChunk,
    StreamStatus,
    UserPreferences,
)

__all__ = [
    "ChatMemory",
    "ChatRequest",
    "ChatResponse",
    "ChatState",
    "CommunicationStyle",
    "ConversationStats",
    "HistoryEntry",
    "Message",
    "ModelSettings",
    "Role",
    "StreamChunk",
    "StreamStatus",
    "UserPreferences",
]
