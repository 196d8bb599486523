"""In-memory conversation state for one chat page.

Framework-agnostic: the NiceGUI page drives it, tests drive it directly.
"""

import logging
import uuid

from chatbot.gemini.prompts import WELCOME_MESSAGE
from chatbot.models.schemas import (
    ChatMemory,
    ChatState,
    ConversationStats,
    HistoryEntry,
    Message,
    Role,
    UserPreferences,
)

logger = logging.getLogger(__name__)

MEMORY_WINDOW = 20
WELCOME_ID = "welcome"


class ChatSession:
    """Manages chat state for a user session.

    The message list only grows until ``clear`` is called. At most one
    assistant reply is in flight at a time; while it is, ``submit`` refuses
    new input.
    """

    def __init__(
        self,
        welcome: str | None = WELCOME_MESSAGE,
        memory_window: int = MEMORY_WINDOW,
    ) -> None:
        self.welcome = welcome
        self.memory_window = memory_window
        self.session_id: str = str(uuid.uuid4())
        self.messages: list[Message] = []
        self.is_loading: bool = False
        self.is_generating: bool = False
        self.error: str | None = None
        self.streaming_message_id: str | None = None
        self.context: str = ""
        self.preferences = UserPreferences()
        self._reset_messages()

    def _reset_messages(self) -> None:
        self.messages = []
        if self.welcome:
            self.messages.append(
                Message(id=WELCOME_ID, content=self.welcome, role=Role.ASSISTANT)
            )

    @property
    def is_busy(self) -> bool:
        return self.is_loading or self.is_generating

    @property
    def streaming_message(self) -> Message | None:
        if self.streaming_message_id is None:
            return None
        return self.get_message(self.streaming_message_id)

    @property
    def streaming_content(self) -> str:
        message = self.streaming_message
        return message.content if message else ""

    @property
    def memory(self) -> ChatMemory:
        """The most recent ``memory_window`` messages plus preferences."""
        return ChatMemory(
            conversation_history=self.messages[-self.memory_window :],
            context=self.context,
            user_preferences=self.preferences,
        )

    @property
    def state(self) -> ChatState:
        return ChatState(
            messages=list(self.messages),
            is_loading=self.is_loading,
            error=self.error,
        )

    def get_message(self, message_id: str) -> Message | None:
        for message in self.messages:
            if message.id == message_id:
                return message
        return None

    def history(self) -> list[HistoryEntry]:
        """Role and content of every message, oldest first."""
        return [HistoryEntry(role=m.role, content=m.content) for m in self.messages]

    def history_before(self, message_id: str) -> list[HistoryEntry]:
        """History of the messages that precede ``message_id``.

        This is what accompanies a submitted message: the conversation as it
        was when the user pressed send.
        """
        entries: list[HistoryEntry] = []
        for message in self.messages:
            if message.id == message_id:
                break
            entries.append(HistoryEntry(role=message.role, content=message.content))
        return entries

    def submit(self, content: str) -> Message | None:
        """Append a user message and mark a reply as pending.

        Args:
            content: Raw input text.

        Returns:
            The appended message, or None when the input is blank or a
            reply is already in progress.
        """
        text = content.strip()
        if not text or self.is_busy:
            return None

        message = Message(id=str(uuid.uuid4()), content=text, role=Role.USER)
        self.messages.append(message)
        self.is_loading = True
        self.is_generating = True
        self.error = None
        logger.debug(f"User message added (messages={len(self.messages)})")
        return message

    def begin_response(self) -> Message:
        """Append the assistant message that streamed chunks will fill."""
        message = Message(
            id=str(uuid.uuid4()),
            content="",
            role=Role.ASSISTANT,
            is_typing=True,
        )
        self.messages.append(message)
        self.streaming_message_id = message.id
        self.is_loading = False
        return message

    def append_chunk(self, text: str) -> Message:
        """Reveal more of the assistant reply."""
        message = self.streaming_message or self.begin_response()
        message.content += text
        return message

    def complete_response(self) -> Message | None:
        """Finish the reply in progress."""
        message = self._finish_streaming()
        if message is not None:
            logger.debug(f"Assistant reply complete (len={len(message.content)})")
        return message

    def fail(self, error: str) -> None:
        """End the reply in progress with a banner error."""
        logger.warning(f"Reply failed: {error}")
        self._finish_streaming()
        self.error = error

    def stop_generation(self) -> str:
        """User cancellation: keep what has been revealed, raise no error.

        Returns:
            The content revealed before stopping.
        """
        partial = self.streaming_content
        if self.is_busy:
            logger.info(f"Generation stopped by user (revealed={len(partial)})")
        self._finish_streaming()
        return partial

    def _finish_streaming(self) -> Message | None:
        message = self.streaming_message
        if message is not None:
            message.is_typing = False
            if not message.content:
                self.messages.remove(message)
                message = None
        self.streaming_message_id = None
        self.is_loading = False
        self.is_generating = False
        return message

    def clear(self) -> None:
        """Reset to the welcome message and forget memory."""
        self.stop_generation()
        self._reset_messages()
        self.error = None
        self.context = ""
        self.preferences = UserPreferences()
        self.session_id = str(uuid.uuid4())
        logger.debug("Conversation cleared")

    def dismiss_error(self) -> None:
        self.error = None

    def stats(self) -> ConversationStats:
        return ConversationStats(
            total_messages=len(self.messages),
            user_messages=sum(1 for m in self.messages if m.role == Role.USER),
            assistant_messages=sum(1 for m in self.messages if m.role == Role.ASSISTANT),
            in_memory=len(self.memory.conversation_history),
            characters=sum(len(m.content) for m in self.messages),
        )
