"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real HTTP requests through ASGITransport
    - Simulated SSE streaming from Gemini reply to reassembled message
    - The page's stream consumer driving a ChatSession

The Gemini endpoint is mocked; everything on our side of it is real.
"""
