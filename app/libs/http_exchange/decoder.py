"""Best-effort decompression of response bodies.

The declared ``content-encoding`` is consulted first; without a recognized
declaration the leading bytes are sniffed. A body that cannot be decoded is
returned unchanged.
"""

import logging
import zlib
from collections.abc import Callable

import brotli

from configs import app_config

from .headers import Headers, get_header

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes], bytes]


def gunzip(content: bytes) -> bytes:
    return zlib.decompress(content, wbits=16 + zlib.MAX_WBITS)


def inflate(content: bytes) -> bytes:
    # Servers send deflate both zlib-wrapped and raw
    try:
        return zlib.decompress(content, wbits=zlib.MAX_WBITS)
    except zlib.error:
        return zlib.decompress(content, wbits=-zlib.MAX_WBITS)


def unbrotli(content: bytes) -> bytes:
    return brotli.decompress(content)


def is_gzip(content: bytes) -> bool:
    return len(content) >= 3 and content[0] == 0x1F and content[1] == 0x8B and content[2] == 0x08


def is_deflate(content: bytes) -> bool:
    return len(content) >= 2 and content[0] == 0x78 and content[1] in (0x01, 0x5E, 0x9C, 0xDA)


DECLARED_DECODERS: dict[str, Decoder] = {
    "gzip": gunzip,
    "deflate": inflate,
    "br": unbrotli,
}

SNIFFED_DECODERS: list[tuple[Callable[[bytes], bool], Decoder]] = [
    (is_gzip, gunzip),
    (is_deflate, inflate),
]


def select_decoder(content: bytes, headers: Headers | None) -> Decoder | None:
    encoding = (get_header(headers, "content-encoding") or "").strip().lower()
    decoder = DECLARED_DECODERS.get(encoding)
    if decoder is not None:
        return decoder
    for matches, sniffed in SNIFFED_DECODERS:
        if matches(content):
            return sniffed
    return None


def _report(error: Exception) -> None:
    if app_config.is_production or not app_config.DECODER_DIAGNOSTICS_ENABLED:
        return
    logger.warning(f"Response body left undecoded: {error!r}")


def maybe_decompress(content: bytes, headers: Headers | None) -> bytes:
    """Decompress ``content`` if it is declared or looks compressed.

    Never raises; the original bytes come back on any failure.
    """
    if not content:
        return content
    decoder = select_decoder(content, headers)
    if decoder is None:
        return content
    try:
        return decoder(content)
    except (zlib.error, brotli.error, ValueError) as e:
        _report(e)
    return content
