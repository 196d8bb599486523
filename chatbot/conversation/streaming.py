"""Simulated streaming of an already complete reply.

The remote API returns the whole reply at once. For visual effect it is
revealed a few characters at a time on a fixed timer.
"""

import asyncio
from collections.abc import AsyncGenerator


async def simulate_stream(
    text: str,
    interval: float = 0.02,
    chunk_size: int = 1,
) -> AsyncGenerator[str]:
    """Yield consecutive slices of ``text`` with a delay between them.

    Args:
        text: The complete text to reveal.
        interval: Seconds to wait after each slice.
        chunk_size: Characters per slice.

    Yields:
        Slices whose concatenation equals ``text``.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")

    for start in range(0, len(text), chunk_size):
        yield text[start : start + chunk_size]
        if interval > 0:
            await asyncio.sleep(interval)


def estimate_reveal_seconds(text: str, interval: float = 0.02, chunk_size: int = 1) -> float:
    """Total time ``simulate_stream`` spends revealing ``text``."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")
    chunks = -(-len(text) // chunk_size)
    return chunks * interval
