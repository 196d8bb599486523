"""Test package for AI Chatbot.

Structure:
    - unit/: Configuration, Gemini client, session state, simulated stream
    - integration/: FastAPI routes and the page's SSE consumer end to end

The remote Gemini endpoint is always an httpx MockTransport.
"""
