"""Unit tests for individual components in isolation.

Coverage:
    - gemini/: Configuration, payload building, reply parsing, errors
    - conversation/: Session state transitions and the simulated stream

Uses mocks for external services when needed.
"""
