"""FastAPI endpoints for the chatbot.

HTTP and streaming routes with async request handling.
Supports Server-Sent Events for simulated chat streaming.

Endpoints:
    - GET /health: Service health status
    - GET /chat/settings: Model configuration for display
    - POST /chat: Complete chat reply
    - POST /chat/stream: Reply replayed as Server-Sent Events
"""

from chatbot.api.app import app, create_app

__all__ = ["app", "create_app"]
