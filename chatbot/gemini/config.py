"""Gemini client configuration with environment variable loading.

Pydantic-based configuration for the generative-language client and the
simulated stream that replays its replies.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiConfig(BaseModel):
    """Configuration for the Gemini ``generateContent`` client.

    The API key is only ever read from the environment; it is never
    compiled into the client.

    Attributes:
        api_key: API key for the Generative Language API.
        base_url: API base URL, up to and including the version segment.
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        top_k: Number of highest-probability tokens considered per step.
        top_p: Nucleus sampling probability mass.
        max_output_tokens: Maximum tokens in generated response.
        history_window: Prior messages forwarded with each request.
        timeout: Request timeout in seconds.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY", ""),
        validate_default=True,
        description="API key for the Generative Language API",
    )
    base_url: str = Field(
        default_factory=lambda: os.getenv("GEMINI_BASE_URL") or DEFAULT_BASE_URL,
        validate_default=True,
        description="API base URL",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.85,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    top_k: int = Field(default=40, ge=1, description="Top-k sampling cutoff")
    top_p: float = Field(default=0.95, ge=0.0, le=1.0, description="Top-p sampling mass")
    max_output_tokens: int = Field(
        default=4096,
        ge=1,
        le=8192,
        description="Maximum tokens in generated response",
    )
    history_window: int = Field(
        default=12,
        ge=0,
        description="Number of prior messages sent as context",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("GEMINI_TIMEOUT", "60")),
        validate_default=True,
        gt=0,
        description="Request timeout in seconds",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set GEMINI_API_KEY or GOOGLE_API_KEY in .env"
            )
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def endpoint(self) -> str:
        """Full ``generateContent`` URL for the configured model."""
        return f"{self.base_url}/models/{self.model_name}:generateContent"


class StreamConfig(BaseModel):
    """Pacing of the simulated character-by-character reveal.

    Attributes:
        interval_ms: Delay between chunks in milliseconds.
        chunk_size: Characters revealed per chunk.
    """

    interval_ms: int = Field(
        default_factory=lambda: int(os.getenv("STREAM_INTERVAL_MS", "20")),
        validate_default=True,
        ge=0,
        description="Delay between revealed chunks in milliseconds",
    )
    chunk_size: int = Field(
        default_factory=lambda: int(os.getenv("STREAM_CHUNK_SIZE", "1")),
        validate_default=True,
        ge=1,
        description="Characters revealed per chunk",
    )

    @property
    def interval(self) -> float:
        return self.interval_ms / 1000


def get_gemini_config() -> GeminiConfig:
    """Create Gemini configuration from environment.

    Returns:
        Configured GeminiConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return GeminiConfig()


def get_stream_config() -> StreamConfig:
    """Create simulated stream configuration from environment."""
    return StreamConfig()
