import httpx
import pytest

from libs.http_exchange.builder import build_transaction, encode_body, parse_target
from libs.http_exchange.exceptions import InvalidTargetError, SetupError
from libs.http_exchange.models import RequestDescription


class TestContentLength:
    def test_added_for_body(self):
        tran, options = build_transaction(RequestDescription(uri="http://example.com/", method="POST", body=b"hello"))
        assert tran.headers["content-length"] == "5"
        assert options.headers["content-length"] == "5"

    def test_counts_bytes_not_characters(self):
        tran, _ = build_transaction(RequestDescription(uri="http://example.com/", method="POST", body="héllo"))
        assert tran.body == "héllo".encode("utf-8")
        assert tran.headers["content-length"] == "6"

    def test_existing_content_length_kept(self):
        desc = RequestDescription(uri="http://example.com/", body=b"hello", headers={"Content-Length": "5"})
        tran, _ = build_transaction(desc)
        assert "content-length" not in tran.headers
        assert tran.headers["Content-Length"] == "5"

    def test_transfer_encoding_blocks_content_length(self):
        desc = RequestDescription(uri="http://example.com/", body=b"hello", headers={"Transfer-Encoding": "chunked"})
        tran, _ = build_transaction(desc)
        assert "content-length" not in tran.headers

    def test_correct_headers_disabled(self):
        desc = RequestDescription(uri="http://example.com/", body=b"hello", correct_headers=False)
        tran, _ = build_transaction(desc)
        assert tran.headers == {}

    def test_no_body_no_header(self):
        tran, _ = build_transaction(RequestDescription(uri="http://example.com/"))
        assert tran.headers == {}

    def test_caller_headers_not_mutated(self):
        headers = {"Accept": "*/*"}
        build_transaction(RequestDescription(uri="http://example.com/", body=b"x", headers=headers))
        assert headers == {"Accept": "*/*"}


class TestTransactionRecord:
    def test_initial_state(self):
        desc = RequestDescription(uri="http://example.com/", type="probe", version="HTTP/1.0")
        tran, _ = build_transaction(desc)
        assert tran.type == "probe"
        assert tran.method == "GET"
        assert tran.uri == "http://example.com/"
        assert tran.version == "HTTP/1.0"
        assert tran.response_version == "HTTP/1.0"
        assert tran.response_code == 0
        assert tran.response_body == b""
        assert tran.info["start_time"] == tran.info["stop_time"]

    def test_info_merges_caller_fields(self):
        desc = RequestDescription(uri="http://example.com/", info={"job": "crawl-1"})
        tran, _ = build_transaction(desc)
        assert tran.info["job"] == "crawl-1"
        assert "start_time" in tran.info
        assert "error" not in tran.info
        assert desc.info == {"job": "crawl-1"}


class TestTransportOptions:
    def test_parsed_target_and_flags(self):
        desc = RequestDescription(uri="https://example.com:8443/a?b=1", method="PUT", reject_unauthorized=False)
        _, options = build_transaction(desc)
        assert options.scheme == "https"
        assert options.url.host == "example.com"
        assert options.url.port == 8443
        assert options.method == "PUT"
        assert options.reject_unauthorized is False

    def test_pass_through_options(self):
        desc = RequestDescription(
            uri="http://example.com/",
            options={"proxy": "http://proxy.example.com:8080", "local_address": "0.0.0.0"},
        )
        _, options = build_transaction(desc)
        assert options.extra == {"proxy": "http://proxy.example.com:8080", "local_address": "0.0.0.0"}

    def test_httpx_request_has_no_transport_timeouts(self):
        _, options = build_transaction(RequestDescription(uri="http://example.com/", headers={"X-Multi": ["a", "b"]}))
        request = options.to_httpx_request()
        assert isinstance(request, httpx.Request)
        assert request.extensions["timeout"] == {"connect": None, "read": None, "write": None, "pool": None}
        assert request.headers.get_list("x-multi") == ["a", "b"]


class TestTargetParsing:
    def test_relative_target_rejected(self):
        with pytest.raises(InvalidTargetError):
            parse_target("/just/a/path")

    def test_setup_error_raised_by_builder(self):
        with pytest.raises(SetupError):
            build_transaction(RequestDescription(uri="not a uri"))

    def test_encode_body(self):
        assert encode_body(None) == b""
        assert encode_body("") == b""
        assert encode_body(bytearray(b"ab")) == b"ab"
