import inspect
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .builder import TransportOptions
from .exceptions import UnsupportedSchemeError
from .types import TransportFactory

logger = logging.getLogger(__name__)

_TRANSPORT_PARAMETERS = frozenset(inspect.signature(httpx.AsyncHTTPTransport).parameters)


def transport_kwargs(options: TransportOptions) -> dict[str, Any]:
    """Pass-through options understood by ``httpx.AsyncHTTPTransport``.

    Anything else is dropped; retries are always off.
    """
    accepted = {name: value for name, value in options.extra.items() if name in _TRANSPORT_PARAMETERS}
    dropped = sorted(set(options.extra) - set(accepted))
    if dropped:
        logger.debug(f"Ignoring transport options: {', '.join(dropped)}")
    accepted["retries"] = 0
    return accepted


def plain_transport(options: TransportOptions) -> httpx.AsyncBaseTransport:
    return httpx.AsyncHTTPTransport(**transport_kwargs(options))


def encrypted_transport(options: TransportOptions) -> httpx.AsyncBaseTransport:
    kwargs = transport_kwargs(options)
    kwargs["verify"] = options.reject_unauthorized
    return httpx.AsyncHTTPTransport(**kwargs)


class TransportRegistry:
    """Maps a URI scheme to the factory that opens a transport for it.

    Every transaction gets a transport of its own; nothing is pooled across
    transactions, so closing the transport closes the socket.
    """

    def __init__(self, factories: Mapping[str, TransportFactory] | None = None):
        self._factories: dict[str, TransportFactory] = dict(factories or {})

    def register(self, scheme: str, factory: TransportFactory) -> None:
        self._factories[scheme.lower()] = factory

    def supports(self, scheme: str) -> bool:
        return scheme.lower() in self._factories

    @property
    def schemes(self) -> list[str]:
        return sorted(self._factories)

    def open(self, options: TransportOptions) -> httpx.AsyncBaseTransport:
        factory = self._factories.get(options.scheme.lower())
        if factory is None:
            raise UnsupportedSchemeError(options.scheme)
        return factory(options)


def default_registry() -> TransportRegistry:
    return TransportRegistry(
        {
            "http": plain_transport,
            "https": encrypted_transport,
        }
    )
