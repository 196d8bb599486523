from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Role(str, Enum):
    """Speaker of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class StreamStatus(str, Enum):
    """Status values for streaming updates."""

    RECEIVED = "received"
    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"


class CommunicationStyle(str, Enum):
    CASUAL = "casual"
    FORMAL = "formal"
    TECHNICAL = "technical"


class Message(BaseModel):
    """A single chat message in the conversation.

    Attributes:
        id: Unique message identifier.
        content: The message text.
        role: Who wrote the message.
        timestamp: When the message was created.
        is_typing: Whether the message is still being revealed.
    """

    id: str
    content: str
    role: Role
    timestamp: datetime = Field(default_factory=datetime.now)
    is_typing: bool = False


class HistoryEntry(BaseModel):
    """Role and content of a prior message, as sent to the API."""

    role: Role
    content: str


class ChatState(BaseModel):
    """Snapshot of what the page renders.

    Attributes:
        messages: Ordered message list, oldest first.
        is_loading: Whether a reply is awaited and nothing is revealed yet.
        error: Banner text for the last failure, if any.
    """

    messages: list[Message] = Field(default_factory=list)
    is_loading: bool = False
    error: str | None = None


class UserPreferences(BaseModel):
    name: str | None = None
    topics: list[str] = Field(default_factory=list)
    communication_style: CommunicationStyle = CommunicationStyle.CASUAL


class ChatMemory(BaseModel):
    """Recent conversation window kept alongside the full message list.

    Attributes:
        conversation_history: The most recent messages of the session.
        context: Free-form context notes.
        user_preferences: What is known about the user.
    """

    conversation_history: list[Message] = Field(default_factory=list)
    context: str = ""
    user_preferences: UserPreferences = Field(default_factory=UserPreferences)


class ChatRequest(BaseModel):
    """Request payload for chat endpoints.

    Attributes:
        message: User's question or prompt.
        history: Prior messages of the conversation, oldest first.
    """

    message: str = Field(..., min_length=1)
    history: list[HistoryEntry] = Field(default_factory=list)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class ChatResponse(BaseModel):
    """Complete reply from the assistant.

    Attributes:
        response: The assistant's generated answer.
        model: Model identifier that produced the answer.
    """

    response: str
    model: str


class StreamChunk(BaseModel):
    """A chunk of streamed response data.

    Attributes:
        content: The text content of this chunk.
        done: Whether this is the final chunk.
        status: Current processing status (received, generating, complete, error).
        error: Error message if something went wrong.
    """

    content: str
    done: bool
    status: StreamStatus | None = None
    error: str | None = None


class ConversationStats(BaseModel):
    """Counters shown in the stats panel.

    ``characters`` is the summed length of all message contents and stands
    in for token usage.
    """

    total_messages: int = Field(..., ge=0)
    user_messages: int = Field(..., ge=0)
    assistant_messages: int = Field(..., ge=0)
    in_memory: int = Field(..., ge=0)
    characters: int = Field(..., ge=0)


class ModelSettings(BaseModel):
    model: str
    temperature: float
    top_k: int
    top_p: float
    max_output_tokens: int
    history_window: int
    memory_window: int
    stream_interval_ms: int
    stream_chunk_size: int
