import asyncio
from collections.abc import AsyncIterator, Awaitable
from typing import TypeVar

T = TypeVar("T")


async def _read(chunks: AsyncIterator[bytes]) -> bytes | None:
    return await anext(chunks, None)


class TimeoutGuard:
    """Silence watchdogs for one transaction.

    The connect timer covers dispatch up to the response metadata; the
    data-idle timer is re-armed for every body chunk. Both share one
    duration and neither bounds the total length of the exchange.
    """

    def __init__(self, timeout_ms: int | None):
        self.delay: float | None = timeout_ms / 1000 if timeout_ms else None

    async def connect(self, response: Awaitable[T]) -> T:
        return await asyncio.wait_for(response, self.delay)

    async def next_chunk(self, chunks: AsyncIterator[bytes]) -> bytes | None:
        """Wait for the next body chunk; ``None`` marks the end of the body."""
        return await asyncio.wait_for(_read(chunks), self.delay)
