"""Client-side conversation state and the simulated token stream.

Responsibilities:
    - Ordered message list with a recent-history memory window
    - Loading, generating and error flags for the page
    - Single in-flight reply with user cancellation
    - Timer-driven reveal of a complete reply
"""

from chatbot.conversation.session import MEMORY_WINDOW, ChatSession
from chatbot.conversation.streaming import estimate_reveal_seconds, simulate_stream

__all__ = ["MEMORY_WINDOW", "ChatSession", "estimate_reveal_seconds", "simulate_stream"]
