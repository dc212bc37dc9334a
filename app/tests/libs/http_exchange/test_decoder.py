import gzip
import logging
import zlib
from unittest.mock import patch

import brotli

from libs.http_exchange.decoder import is_deflate, is_gzip, maybe_decompress, select_decoder

PAYLOAD = b'{"message": "hello world"}' * 20


class TestSniffing:
    def test_gzip_magic(self):
        assert is_gzip(gzip.compress(PAYLOAD))
        assert not is_gzip(PAYLOAD)
        assert not is_gzip(b"\x1f")

    def test_deflate_magic(self):
        assert is_deflate(zlib.compress(PAYLOAD))
        assert not is_deflate(PAYLOAD)
        assert not is_deflate(b"x")

    def test_plain_bytes_have_no_decoder(self):
        assert select_decoder(PAYLOAD, {}) is None


class TestDeclaredEncoding:
    def test_gzip(self):
        assert maybe_decompress(gzip.compress(PAYLOAD), {"content-encoding": "gzip"}) == PAYLOAD

    def test_declared_encoding_is_trimmed_and_case_insensitive(self):
        headers = {"Content-Encoding": "  GZip "}
        assert maybe_decompress(gzip.compress(PAYLOAD), headers) == PAYLOAD

    def test_deflate_zlib_wrapped(self):
        assert maybe_decompress(zlib.compress(PAYLOAD), {"content-encoding": "deflate"}) == PAYLOAD

    def test_deflate_raw(self):
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        raw = compressor.compress(PAYLOAD) + compressor.flush()
        assert maybe_decompress(raw, {"content-encoding": "deflate"}) == PAYLOAD

    def test_brotli(self):
        assert maybe_decompress(brotli.compress(PAYLOAD), {"content-encoding": "br"}) == PAYLOAD

    def test_unknown_encoding_falls_back_to_sniffing(self):
        assert maybe_decompress(gzip.compress(PAYLOAD), {"content-encoding": "identity"}) == PAYLOAD


class TestSniffedEncoding:
    def test_gzip_without_header(self):
        assert maybe_decompress(gzip.compress(PAYLOAD), {}) == PAYLOAD

    def test_deflate_without_header(self):
        assert maybe_decompress(zlib.compress(PAYLOAD), {}) == PAYLOAD

    def test_plain_bytes_unchanged(self):
        assert maybe_decompress(PAYLOAD, {"content-type": "application/json"}) == PAYLOAD


class TestDecodeFailures:
    def test_corrupt_gzip_returns_original(self):
        corrupt = b"\x1f\x8b\x08not really gzip"
        assert maybe_decompress(corrupt, {}) == corrupt

    def test_declared_but_not_compressed(self):
        assert maybe_decompress(PAYLOAD, {"content-encoding": "br"}) == PAYLOAD

    def test_empty_body(self):
        assert maybe_decompress(b"", {"content-encoding": "gzip"}) == b""

    def test_failure_logged_outside_production(self, caplog):
        with caplog.at_level(logging.WARNING, logger="libs.http_exchange.decoder"):
            maybe_decompress(PAYLOAD, {"content-encoding": "gzip"})
        assert "left undecoded" in caplog.text

    def test_failure_silent_in_production(self, caplog):
        with patch("libs.http_exchange.decoder.app_config") as config:
            config.is_production = True
            with caplog.at_level(logging.WARNING, logger="libs.http_exchange.decoder"):
                assert maybe_decompress(PAYLOAD, {"content-encoding": "gzip"}) == PAYLOAD
        assert caplog.text == ""
