import logging

from .models import RequestDescription, Transaction
from .types import Middleware, NextFn


def timeout_middleware(timeout: int | None) -> Middleware:
    async def middleware(description: RequestDescription, next: NextFn) -> Transaction:
        return await next(description.with_timeout(timeout))

    return middleware


def logging_middleware(logger: logging.Logger | None = None) -> Middleware:
    log = logger or logging.getLogger(__name__)

    async def middleware(description: RequestDescription, next: NextFn) -> Transaction:
        log.info(f"-> {description.method} {description.uri}")
        transaction = await next(description)
        if transaction.error is not None:
            log.warning(
                f"<- {transaction.response_code} ({transaction.duration_ms:.0f}ms) {transaction.error!r}"
            )
        else:
            log.info(f"<- {transaction.response_code} ({transaction.duration_ms:.0f}ms)")
        return transaction

    return middleware


def headers_middleware(**headers: str) -> Middleware:
    """Add default headers; headers already on the request win."""

    async def middleware(description: RequestDescription, next: NextFn) -> Transaction:
        present = {name.lower() for name in description.headers}
        missing = {name: value for name, value in headers.items() if name.lower() not in present}
        return await next(description.with_headers(**missing))

    return middleware
