"""HTTP exchange engine."""

from .builder import TransportOptions, build_transaction
from .decoder import maybe_decompress
from .engine import HttpExchange, fetch, request
from .exceptions import (
    HttpExchangeError,
    InvalidTargetError,
    SetupError,
    TooManyRedirects,
    TransactionAbort,
    TransactionAborted,
    TransactionError,
    TransactionFailure,
    TransactionTimeout,
    UnsupportedSchemeError,
)
from .headers import get_header
from .middleware import headers_middleware, logging_middleware, timeout_middleware
from .models import RequestDescription, Transaction
from .scheduler import Scheduler
from .signals import Cause, TerminalSignal
from .transport import TransportRegistry, default_registry
from .types import Middleware, NextFn, TransportFactory

__all__ = [
    "HttpExchange",
    "request",
    "fetch",
    "Scheduler",
    "RequestDescription",
    "Transaction",
    "TransportOptions",
    "build_transaction",
    "TransportRegistry",
    "default_registry",
    "TransportFactory",
    "maybe_decompress",
    "get_header",
    "Cause",
    "TerminalSignal",
    "Middleware",
    "NextFn",
    "timeout_middleware",
    "logging_middleware",
    "headers_middleware",
    "HttpExchangeError",
    "SetupError",
    "UnsupportedSchemeError",
    "InvalidTargetError",
    "TransactionFailure",
    "TransactionTimeout",
    "TransactionAborted",
    "TransactionAbort",
    "TransactionError",
    "TooManyRedirects",
]
