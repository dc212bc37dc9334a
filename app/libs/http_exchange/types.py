from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from .builder import TransportOptions
    from .models import RequestDescription, Transaction

TransportFactory = Callable[["TransportOptions"], httpx.AsyncBaseTransport]

NextFn = Callable[["RequestDescription"], Awaitable["Transaction"]]
Middleware = Callable[["RequestDescription", NextFn], Awaitable["Transaction"]]
