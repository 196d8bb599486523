"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat message display with simulated streaming
    - Typing indicator, error banner and stop control
    - Stats and model settings panels

Contains minimal business logic. Conversation state lives in
``chatbot.conversation``; replies come from the API.
"""
