import contextlib
import logging
from collections.abc import Awaitable, Callable

from .builder import now_ms
from .decoder import maybe_decompress
from .models import Transaction
from .signals import TerminalSignal
from .timeout import TimeoutGuard

logger = logging.getLogger(__name__)


async def _close_quietly(close: Callable[[], Awaitable[None]]) -> None:
    try:
        await close()
    except Exception as e:
        # the socket is frequently gone already
        logger.debug(f"Ignoring cleanup failure: {e!r}")


class Completion:
    """Single path by which a transaction is finalized.

    Owns everything the transaction holds open (transport, response stream)
    and the body accumulated so far. ``finish`` runs at most once; a later
    terminal signal gets the transaction back untouched.
    """

    def __init__(self, transaction: Transaction, guard: TimeoutGuard):
        self.transaction = transaction
        self.guard = guard
        self._resources = contextlib.AsyncExitStack()
        self._chunks: list[bytes] = []
        self._finished = False

    @property
    def received(self) -> int:
        return sum(len(chunk) for chunk in self._chunks)

    def own(self, close: Callable[[], Awaitable[None]]) -> None:
        """Register a resource to close on release, most recent first."""
        self._resources.push_async_callback(_close_quietly, close)

    def append(self, chunk: bytes) -> None:
        self._chunks.append(chunk)

    async def release(self) -> None:
        await self._resources.aclose()

    async def finish(self, signal: TerminalSignal) -> Transaction:
        if self._finished:
            return self.transaction
        self._finished = True

        await self.release()

        transaction = self.transaction
        if signal.abnormal:
            logger.warning(
                f"{transaction.method} {transaction.uri} ended with {signal.cause} "
                f"during {signal.phase} after {self.received} bytes: {signal.error!r}"
            )
            if "error" not in transaction.info:
                transaction.info["error"] = signal.default_error()

        transaction.info["stop_time"] = now_ms()
        transaction.response_body = maybe_decompress(b"".join(self._chunks), transaction.response_headers)

        return transaction
