"""Tests for WebRequest and WebResponse."""

import dataclasses

import httpx
import pytest

from limited_web_client.types.request import WebRequest, WebResponse


class TestWebRequest:
    def test_parses_string_url(self):
        request = WebRequest(url="https://api.example.com/v1/ticker?pair=BTC", method="GET")

        assert isinstance(request.url, httpx.URL)
        assert request.url.host == "api.example.com"
        assert request.url.path == "/v1/ticker"
        assert request.body is None

    def test_normalizes_headers(self):
        request = WebRequest(
            url="http://example.com/", method="GET", headers={"X-Api-Key": "secret"}
        )

        assert isinstance(request.headers, httpx.Headers)
        assert request.headers["x-api-key"] == "secret"

    def test_default_headers_empty(self):
        request = WebRequest(url="http://example.com/", method="GET")
        assert len(request.headers) == 0

    @pytest.mark.parametrize("url", ["/relative/path", "ftp://example.com/file", "file:///etc/hosts"])
    def test_rejects_unsupported_urls(self, url):
        with pytest.raises(ValueError, match="url"):
            WebRequest(url=url, method="GET")

    @pytest.mark.parametrize("method", ["", "GE T", "GET\r\n"])
    def test_rejects_invalid_method(self, method):
        with pytest.raises(ValueError, match="method"):
            WebRequest(url="http://example.com/", method=method)

    def test_rejects_non_bytes_body(self):
        with pytest.raises(TypeError, match="bytes"):
            WebRequest(url="http://example.com/", method="POST", body="text")

    def test_is_frozen(self):
        request = WebRequest(url="http://example.com/", method="GET")
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.method = "POST"


class TestWebResponse:
    def _make(self, headers=None, body=b'{"ok": true}'):
        return WebResponse(
            status_code=200,
            status_message="OK",
            headers=httpx.Headers(headers or {}),
            body=body,
        )

    def test_content_type(self):
        response = self._make({"Content-Type": "application/json; charset=utf-8"})
        assert response.content_type == "application/json"

    def test_content_type_missing(self):
        assert self._make().content_type is None

    def test_text(self):
        assert self._make(body="héllo".encode()).text() == "héllo"

    def test_to_dict(self):
        response = self._make({"X-Trace": "abc"})
        assert response.to_dict() == {
            "status_code": 200,
            "status_message": "OK",
            "headers": {"x-trace": "abc"},
            "body_length": 12,
        }
