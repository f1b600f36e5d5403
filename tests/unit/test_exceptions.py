"""Unit tests for the exceptions module.

Tests all exception classes defined in limited_web_client.exceptions.
"""

import json

import httpx
import pytest

from limited_web_client.exceptions import (
    CommunicationError,
    ConfigurationError,
    DecodingError,
    DisposedError,
    InvalidOperationError,
    LimiterBackendError,
    OperationCancelledError,
    QuotaTimeoutError,
    UnsupportedProxyError,
    WebClientError,
    WebError,
)


class TestWebClientError:
    """Tests for the base WebClientError exception."""

    def test_can_be_caught_as_exception(self):
        with pytest.raises(Exception):  # noqa: B017
            raise WebClientError("test error")

    def test_message_preserved(self):
        assert str(WebClientError("test message")) == "test message"

    @pytest.mark.parametrize(
        "error",
        [
            CommunicationError("boom"),
            WebError(500, "Internal Server Error", {}, b""),
            OperationCancelledError(),
            DisposedError("gone"),
            QuotaTimeoutError("slow"),
            DecodingError("bad"),
            InvalidOperationError("nope"),
            ConfigurationError("bad config"),
            UnsupportedProxyError("socks5"),
            LimiterBackendError("redis down"),
        ],
    )
    def test_every_error_is_a_web_client_error(self, error):
        assert isinstance(error, WebClientError)


class TestCommunicationError:
    """Tests for CommunicationError."""

    def test_stores_inner_error_and_cause(self):
        inner = ConnectionRefusedError("refused")
        error = CommunicationError("HTTP request failed", inner)

        assert error.inner_error is inner
        assert error.__cause__ is inner
        assert str(error) == "HTTP request failed"

    def test_inner_error_defaults_to_none(self):
        error = CommunicationError("failed")
        assert error.inner_error is None
        assert error.__cause__ is None

    def test_is_connect_timeout(self):
        assert CommunicationError(CommunicationError.CONNECT_TIMEOUT).is_connect_timeout
        assert not CommunicationError(
            CommunicationError.RESPONSE_TIMEOUT
        ).is_connect_timeout

    def test_timeout_messages(self):
        assert CommunicationError.CONNECT_TIMEOUT == "Connect Timeout"
        assert CommunicationError.RESPONSE_TIMEOUT == "Response Timeout"


class TestWebError:
    """Tests for WebError."""

    def _make(self, content_type=None, body=b"Fake data"):
        headers = httpx.Headers({"Content-Type": content_type} if content_type else {})
        return WebError(
            404,
            "Not Found",
            headers,
            body,
            request_method="GET",
            request_url="http://example.com/missing",
            request_headers={"Accept": "application/json"},
            request_body=None,
        )

    def test_carries_round_trip(self):
        error = self._make()

        assert error.status_code == 404
        assert error.status_message == "Not Found"
        assert error.body == b"Fake data"
        assert error.request_method == "GET"
        assert error.request_url == "http://example.com/missing"
        assert error.request_headers == {"Accept": "application/json"}
        assert error.request_body is None

    def test_message(self):
        assert str(self._make()) == "404 Not Found"

    def test_message_without_reason_phrase(self):
        assert str(WebError(599, "", {}, b"")) == "599"

    def test_content_type_strips_parameters(self):
        error = self._make("Application/JSON; charset=utf-8")
        assert error.content_type == "application/json"

    def test_content_type_missing(self):
        assert self._make().content_type is None

    def test_json_decodes_body(self):
        error = self._make("application/json", json.dumps({"error": "missing"}).encode())
        assert error.json() == {"error": "missing"}

    def test_json_accepts_suffix_types(self):
        error = self._make("application/problem+json", b'{"title": "x"}')
        assert error.json() == {"title": "x"}

    def test_json_rejects_non_json_content_type(self):
        with pytest.raises(InvalidOperationError, match="not JSON"):
            self._make("text/plain").json()

    def test_json_rejects_missing_content_type(self):
        with pytest.raises(InvalidOperationError):
            self._make().json()

    def test_json_invalid_body_raises_decoding_error(self):
        with pytest.raises(DecodingError) as exc_info:
            self._make("application/json", b"{not json").json()
        assert exc_info.value.body == b"{not json"


class TestOperationCancelledError:
    """Tests for OperationCancelledError."""

    def test_default_message(self):
        assert str(OperationCancelledError()) == "Cancelled by user"

    def test_custom_message(self):
        assert str(OperationCancelledError("shutdown")) == "shutdown"


class TestQuotaTimeoutError:
    """Tests for QuotaTimeoutError."""

    def test_stores_attributes(self):
        error = QuotaTimeoutError("timed out", timeout_ms=3000, key="exchange")
        assert error.timeout_ms == 3000
        assert error.key == "exchange"

    def test_defaults_to_none(self):
        error = QuotaTimeoutError("timed out")
        assert error.timeout_ms is None
        assert error.key is None

    def test_is_not_a_cancellation(self):
        assert not isinstance(QuotaTimeoutError("x"), OperationCancelledError)


class TestDecodingError:
    """Tests for DecodingError."""

    def test_stores_body(self):
        error = DecodingError("bad json", b"<html>")
        assert error.body == b"<html>"
        assert str(error) == "bad json"


class TestUnsupportedProxyError:
    """Tests for UnsupportedProxyError."""

    def test_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            raise UnsupportedProxyError("socks5")

    def test_stores_proxy_type(self):
        error = UnsupportedProxyError("socks5")
        assert error.proxy_type == "socks5"
        assert "socks5" in str(error)
