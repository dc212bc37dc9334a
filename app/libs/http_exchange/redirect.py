import logging
from urllib.parse import urljoin

from .headers import Headers, get_header
from .models import RequestDescription

logger = logging.getLogger(__name__)


def is_redirect(status_code: int, headers: Headers) -> bool:
    return 300 <= status_code < 400 and get_header(headers, "location") is not None


class RedirectFollower:
    def __init__(self, enabled: bool, max_redirects: int):
        self.enabled = enabled
        self.max_redirects = max_redirects
        self.hops = 0

    @property
    def exhausted(self) -> bool:
        return self.hops >= self.max_redirects

    def location(self, uri: str, status_code: int, headers: Headers) -> str | None:
        """Absolute target of a followable redirect, or ``None``."""
        if not self.enabled or not is_redirect(status_code, headers):
            return None
        return urljoin(uri, get_header(headers, "location"))

    def advance(self, description: RequestDescription, location: str) -> RequestDescription:
        self.hops += 1
        logger.info(f"Redirect {self.hops}/{self.max_redirects}: {description.uri} -> {location}")
        return description.with_uri(location)
