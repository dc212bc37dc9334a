import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from .exceptions import InvalidTargetError
from .headers import HeaderValue, has_header, to_header_pairs
from .models import RequestDescription, Transaction

# Timeouts are governed by the timeout guard, never by httpcore.
_NO_TRANSPORT_TIMEOUTS = {"connect": None, "read": None, "write": None, "pool": None}


def now_ms() -> float:
    return time.perf_counter() * 1000


@dataclass(frozen=True)
class TransportOptions:
    url: httpx.URL
    method: str
    headers: dict[str, HeaderValue]
    body: bytes = b""
    reject_unauthorized: bool = True
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def scheme(self) -> str:
        return self.url.scheme

    def to_httpx_request(self) -> httpx.Request:
        return httpx.Request(
            method=self.method,
            url=self.url,
            headers=to_header_pairs(self.headers),
            content=self.body,
            extensions={"timeout": dict(_NO_TRANSPORT_TIMEOUTS)},
        )


def encode_body(body: bytes | str | None) -> bytes:
    if not body:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


def parse_target(uri: str) -> httpx.URL:
    try:
        url = httpx.URL(uri)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidTargetError(f"Invalid request target {uri!r}: {e}") from e
    if not url.scheme or not url.host:
        raise InvalidTargetError(f"Request target must be an absolute URI: {uri!r}")
    return url


def build_transaction(description: RequestDescription) -> tuple[Transaction, TransportOptions]:
    """Normalize a request description into a transaction and transport options.

    Raises:
        InvalidTargetError: when the uri is not an absolute URI.
    """
    headers = dict(description.headers)
    body = encode_body(description.body)

    if body and description.correct_headers:
        if not has_header(headers, "transfer-encoding") and not has_header(headers, "content-length"):
            headers["content-length"] = str(len(body))

    url = parse_target(description.uri)

    now = now_ms()
    transaction = Transaction(
        type=description.type,
        method=description.method,
        uri=description.uri,
        version=description.version,
        headers=headers,
        body=body,
        response_version=description.version,
        info={
            **description.info,
            "start_time": now,
            "stop_time": now,
        },
    )

    options = TransportOptions(
        url=url,
        method=description.method,
        headers=headers,
        body=body,
        reject_unauthorized=description.reject_unauthorized,
        extra=dict(description.options),
    )
    return transaction, options
