import logging
from collections.abc import AsyncGenerator, Mapping
from typing import Any

import httpx

from configs import app_config
from extensions.ext_logging import trace_id_generator, trace_id_var

from .builder import TransportOptions, build_transaction
from .completion import Completion
from .exceptions import TooManyRedirects
from .headers import HeaderValue, collect_headers
from .models import RequestDescription, Transaction
from .redirect import RedirectFollower
from .signals import EXCHANGE_ERRORS, Phase, TerminalSignal
from .timeout import TimeoutGuard
from .transport import TransportRegistry, default_registry

logger = logging.getLogger(__name__)


def _raw_chunks(response: httpx.Response) -> AsyncGenerator[bytes]:
    # Body bytes as they come off the wire, content-encoding untouched.
    # Iterating the stream itself also works for responses built with
    # in-memory content, which httpx marks as already read.
    return aiter(response.stream)


class HttpExchange:
    """Performs request/response exchanges and always returns a transaction.

    Only setup errors (unsupported scheme, malformed target) are raised;
    everything that goes wrong once the transport is open ends up in
    ``transaction.info["error"]``.
    """

    def __init__(
        self,
        registry: TransportRegistry | None = None,
        max_redirects: int | None = None,
    ):
        self._registry = registry or default_registry()
        self._max_redirects = app_config.HTTP_EXCHANGE_MAX_REDIRECTS if max_redirects is None else max_redirects

    @property
    def registry(self) -> TransportRegistry:
        return self._registry

    async def request(self, description: RequestDescription | Mapping[str, Any]) -> Transaction:
        description = RequestDescription.coerce(description)
        follower = RedirectFollower(description.follow, self._max_redirects)

        token = trace_id_var.set(trace_id_generator())
        try:
            while True:
                outcome = await self._exchange(description, follower)
                if isinstance(outcome, Transaction):
                    return outcome
                description = follower.advance(description, outcome)
        finally:
            trace_id_var.reset(token)

    async def fetch(
        self,
        uri: str,
        headers: dict[str, HeaderValue] | None = None,
        **options: Any,
    ) -> Transaction:
        """GET ``uri``; keyword options are applied last and may override ``method``."""
        return await self.request({"method": "GET", "uri": uri, "headers": headers, **options})

    async def _exchange(self, description: RequestDescription, follower: RedirectFollower) -> Transaction | str:
        """Run one hop; returns the finished transaction or the redirect target."""
        transaction, options = build_transaction(description)
        transport = self._registry.open(options)

        completion = Completion(transaction, TimeoutGuard(description.timeout))
        completion.own(transport.aclose)
        try:
            logger.debug(f"-> {transaction.method} {transaction.uri}")
            outcome = await self._drive(description, options, transport, completion, follower)
            if isinstance(outcome, str):
                # the redirecting hop lets go of its socket before the next hop starts
                await completion.release()
                return outcome
            return await completion.finish(outcome)
        finally:
            await completion.release()

    async def _drive(
        self,
        description: RequestDescription,
        options: TransportOptions,
        transport: httpx.AsyncBaseTransport,
        completion: Completion,
        follower: RedirectFollower,
    ) -> TerminalSignal | str:
        transaction = completion.transaction
        guard = completion.guard

        try:
            response = await guard.connect(transport.handle_async_request(options.to_httpx_request()))
        except EXCHANGE_ERRORS as e:
            return TerminalSignal.from_exception(e, Phase.REQUEST)
        completion.own(response.aclose)

        headers = collect_headers(response.headers.multi_items())
        location = follower.location(transaction.uri, response.status_code, headers)
        if location is not None:
            if not follower.exhausted:
                return location
            transaction.info.setdefault(
                "error",
                TooManyRedirects(f"Exceeded {follower.max_redirects} redirects, last target {location}"),
            )

        transaction.response_version = response.http_version
        transaction.response_code = response.status_code
        transaction.response_message = response.reason_phrase
        transaction.response_headers = headers

        if not description.download:
            return TerminalSignal.end()

        chunks = _raw_chunks(response)
        completion.own(chunks.aclose)
        try:
            while True:
                chunk = await guard.next_chunk(chunks)
                if chunk is None:
                    break
                completion.append(chunk)
        except EXCHANGE_ERRORS as e:
            return TerminalSignal.from_exception(e, Phase.RESPONSE)
        return TerminalSignal.end()


_default_exchange: HttpExchange | None = None


def get_default_exchange() -> HttpExchange:
    global _default_exchange
    if _default_exchange is None:
        _default_exchange = HttpExchange()
    return _default_exchange


async def request(
    description: RequestDescription | Mapping[str, Any],
    *,
    registry: TransportRegistry | None = None,
    max_redirects: int | None = None,
) -> Transaction:
    if registry is None and max_redirects is None:
        exchange = get_default_exchange()
    else:
        exchange = HttpExchange(registry=registry, max_redirects=max_redirects)
    return await exchange.request(description)


async def fetch(uri: str, headers: dict[str, HeaderValue] | None = None, **options: Any) -> Transaction:
    return await get_default_exchange().fetch(uri, headers, **options)
