"""Gemini ``generateContent`` client.

Wraps the single outbound call of the application:

1. **History truncation** - only the last ``history_window`` prior messages
   are forwarded, with ``assistant`` mapped to Gemini's ``model`` role and
   the current message appended as the final ``user`` turn.

2. **Static instructions** - every request carries the same system prompt,
   generation config and safety settings.

3. **One error family** - transport failures, non-2xx replies, malformed
   and empty replies all raise a ``GeminiError`` subclass whose message is fit for
   the error banner. Cancellation is never caught here, so cancelling the
   awaiting task aborts the request.
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from chatbot.gemini.config import GeminiConfig, get_gemini_config
from chatbot.gemini.prompts import HARM_CATEGORIES, SAFETY_THRESHOLD, SYSTEM_PROMPT
from chatbot.models.schemas import HistoryEntry, Role

logger = logging.getLogger(__name__)


class GeminiError(Exception):
    """Base class for failures talking to the Gemini API."""


class GeminiAPIError(GeminiError):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail or "Unknown error"
        super().__init__(f"HTTP error! status: {status_code} - {self.detail}")


class EmptyResponseError(GeminiError):
    """Raised when the API answers without any candidate text."""

    def __init__(self) -> None:
        super().__init__("No response from AI assistant")


class GeminiConnectionError(GeminiError):
    """Raised when the API cannot be reached."""


class InvalidResponseError(GeminiError):
    """Raised when a success reply is not a generateContent JSON object."""

    def __init__(self) -> None:
        super().__init__("Invalid response from AI assistant")


def to_gemini_role(role: Role) -> str:
    return "model" if role == Role.ASSISTANT else "user"


class GeminiClient:
    """Async client for one model of the Generative Language API."""

    def __init__(
        self,
        config: GeminiConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            http_client: Optional preconfigured httpx client.
        """
        self._config = config or get_gemini_config()
        self._http = http_client or httpx.AsyncClient(timeout=self._config.timeout)

    @property
    def config(self) -> GeminiConfig:
        return self._config

    def build_contents(
        self,
        message: str,
        history: Sequence[HistoryEntry] = (),
    ) -> list[dict[str, Any]]:
        """Convert conversation history plus the new message to Gemini turns.

        Args:
            message: The user's new message.
            history: Prior messages, oldest first.

        Returns:
            List of ``{"role", "parts"}`` turns ending with the new message.
        """
        window = self._config.history_window
        recent = list(history)[-window:] if window else []
        contents = [
            {"role": to_gemini_role(entry.role), "parts": [{"text": entry.content}]}
            for entry in recent
        ]
        contents.append({"role": "user", "parts": [{"text": message}]})
        return contents

    def build_payload(
        self,
        message: str,
        history: Sequence[HistoryEntry] = (),
    ) -> dict[str, Any]:
        """Build the JSON body of a ``generateContent`` request."""
        return {
            "contents": self.build_contents(message, history),
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "generationConfig": {
                "temperature": self._config.temperature,
                "topK": self._config.top_k,
                "topP": self._config.top_p,
                "maxOutputTokens": self._config.max_output_tokens,
                "candidateCount": 1,
            },
            "safetySettings": [
                {"category": category, "threshold": SAFETY_THRESHOLD}
                for category in HARM_CATEGORIES
            ],
        }

    async def generate(
        self,
        message: str,
        history: Sequence[HistoryEntry] = (),
    ) -> str:
        """Send a message and return the complete reply text.

        Args:
            message: The user's message.
            history: Prior messages, oldest first.

        Returns:
            Text of the first candidate.

        Raises:
            GeminiAPIError: The API answered with an error status.
            EmptyResponseError: The API answered without candidates.
            GeminiConnectionError: The API could not be reached.
            InvalidResponseError: The API answered 2xx with a non-JSON body.
        """
        payload = self.build_payload(message, history)
        logger.debug(
            f"Calling {self._config.model_name} with {len(payload['contents'])} turns"
        )

        try:
            response = await self._http.post(
                self._config.endpoint,
                params={"key": self._config.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as e:
            logger.error(f"Error calling AI API: {e!r}")
            raise GeminiConnectionError(f"Connection failed: {e}") from e

        if response.is_error:
            detail = _error_detail(response)
            logger.error(f"AI API returned {response.status_code}: {detail}")
            raise GeminiAPIError(response.status_code, detail)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"AI API returned a non-JSON body: {response.text[:200]!r}")
            raise InvalidResponseError() from e

        text = _extract_text(data)
        logger.info(f"Reply received (len={len(text)})")
        return text

    async def aclose(self) -> None:
        await self._http.aclose()


def _error_detail(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        return error.get("message")
    return None


def _extract_text(data: Any) -> str:
    if not isinstance(data, dict):
        raise InvalidResponseError()

    candidates = data.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        raise EmptyResponseError()

    candidate = candidates[0] if isinstance(candidates[0], dict) else {}
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    texts = [
        part["text"]
        for part in parts or []
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    ]
    if not texts:
        raise EmptyResponseError()
    return "".join(texts)


# Module-level singleton instance
_gemini_client: GeminiClient | None = None


def get_gemini_client() -> GeminiClient:
    """Get or create the global Gemini client.

    Returns:
        The GeminiClient instance.
    """
    global _gemini_client
    if _gemini_client is None:
        _gemini_client = GeminiClient()
    return _gemini_client


async def close_gemini_client() -> None:
    """Close the global client if one was created."""
    global _gemini_client
    if _gemini_client is not None:
        await _gemini_client.aclose()
        _gemini_client = None
