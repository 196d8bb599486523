"""AI Chatbot - a browser chat interface over the Gemini API.

Combines FastAPI for HTTP streaming, httpx for the outbound API call,
NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and simulated streaming responses
    - gemini: Configuration and the generateContent client
    - conversation: Message state, memory window, simulated stream
    - ui: Web interface for chat interactions
    - models: Message and request/response schemas
"""

__version__ = "0.1.0"
