import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

from configs import app_config

from .headers import HeaderValue

_OPTION_ALIASES = {
    "correctHeaders": "correct_headers",
    "rejectUnauthorized": "reject_unauthorized",
}


def _default_timeout() -> int:
    return app_config.HTTP_EXCHANGE_TIMEOUT_MS


@dataclass(frozen=True)
class RequestDescription:
    uri: str
    method: str = "GET"
    version: str = "HTTP/1.1"
    type: str = "base"
    headers: dict[str, HeaderValue] = field(default_factory=dict)
    body: bytes | str = b""
    info: dict[str, Any] = field(default_factory=dict)
    # milliseconds, falsy disables both the connect and the data-idle timer
    timeout: int | None = field(default_factory=_default_timeout)
    follow: bool = False
    download: bool = True
    correct_headers: bool = True
    reject_unauthorized: bool = True
    # passed through to the transport factory
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RequestDescription":
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        options: dict[str, Any] = dict(data.get("options") or {})
        for key, value in data.items():
            if key == "options":
                continue
            name = _OPTION_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                options[key] = value
        if kwargs.get("headers") is None:
            kwargs.pop("headers", None)
        if kwargs.get("body") is None:
            kwargs.pop("body", None)
        if kwargs.get("info") is None:
            kwargs.pop("info", None)
        return cls(**kwargs, options=options)

    @classmethod
    def coerce(cls, value: "RequestDescription | Mapping[str, Any]") -> "RequestDescription":
        if isinstance(value, RequestDescription):
            return value
        return cls.from_mapping(value)

    def with_uri(self, uri: str) -> "RequestDescription":
        return replace(self, uri=uri)

    def with_headers(self, **headers: str) -> "RequestDescription":
        return replace(self, headers={**self.headers, **headers})

    def with_timeout(self, timeout: int | None) -> "RequestDescription":
        return replace(self, timeout=timeout)


@dataclass
class Transaction:
    """Record of one request/response exchange, returned to the caller.

    Response fields always hold a value, even when no response arrived.
    ``info`` carries ``start_time`` and ``stop_time`` in milliseconds and
    ``error`` when the exchange ended abnormally.
    """

    method: str
    uri: str
    version: str = "HTTP/1.1"
    type: str = "base"
    headers: dict[str, HeaderValue] = field(default_factory=dict)
    body: bytes = b""

    response_version: str = "HTTP/1.1"
    response_code: int = 0
    response_message: str = ""
    response_headers: dict[str, HeaderValue] = field(default_factory=dict)
    response_body: bytes = b""

    info: dict[str, Any] = field(default_factory=dict)

    @property
    def error(self) -> BaseException | None:
        return self.info.get("error")

    @property
    def duration_ms(self) -> float:
        return self.info["stop_time"] - self.info["start_time"]

    def json(self) -> Any:
        return json.loads(self.response_body)

    def text(self) -> str:
        return self.response_body.decode("utf-8")
