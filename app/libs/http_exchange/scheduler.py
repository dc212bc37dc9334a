import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from configs import app_config

from .engine import HttpExchange
from .headers import HeaderValue
from .middleware import headers_middleware
from .models import RequestDescription, Transaction
from .types import Middleware


class Scheduler:
    """Issues transactions through an exchange with bounded concurrency.

    Middlewares wrap every transaction in the order given; the innermost
    call hands the description to the exchange.
    """

    def __init__(
        self,
        concurrency: int | None = None,
        middlewares: list[Middleware] | None = None,
        exchange: HttpExchange | None = None,
    ):
        self._concurrency = concurrency or app_config.SCHEDULER_CONCURRENCY
        self._semaphore = asyncio.Semaphore(self._concurrency)
        self._middlewares = list(middlewares or [])
        if app_config.HTTP_EXCHANGE_USER_AGENT:
            self._middlewares.append(headers_middleware(**{"User-Agent": app_config.HTTP_EXCHANGE_USER_AGENT}))
        self._exchange = exchange or HttpExchange()
        self._in_flight = 0

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def in_flight(self) -> int:
        return self._in_flight

    async def request(self, description: RequestDescription | Mapping[str, Any]) -> Transaction:
        description = RequestDescription.coerce(description)
        async with self._semaphore:
            self._in_flight += 1
            try:
                return await self._execute(description)
            finally:
                self._in_flight -= 1

    async def fetch(
        self,
        uri: str,
        headers: dict[str, HeaderValue] | None = None,
        **options: Any,
    ) -> Transaction:
        return await self.request({"method": "GET", "uri": uri, "headers": headers, **options})

    async def gather(self, descriptions: Iterable[RequestDescription | Mapping[str, Any]]) -> list[Transaction]:
        return list(await asyncio.gather(*(self.request(description) for description in descriptions)))

    async def _execute(self, description: RequestDescription) -> Transaction:
        if self._middlewares:
            return await self._execute_with_middleware(description, 0)
        return await self._exchange.request(description)

    async def _execute_with_middleware(self, description: RequestDescription, index: int) -> Transaction:
        if index >= len(self._middlewares):
            return await self._exchange.request(description)

        middleware = self._middlewares[index]

        async def next_fn(desc: RequestDescription) -> Transaction:
            return await self._execute_with_middleware(desc, index + 1)

        return await middleware(description, next_fn)
