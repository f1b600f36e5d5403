"""Tests for proxy, TLS and client configuration."""

import pytest

from limited_web_client.types.options import (
    HttpProxyOpts,
    Socks5ProxyOpts,
    SslCertOpts,
    SslOptsBase,
    SslPfxOpts,
    WebClientConfig,
)


class TestProxyOpts:
    def test_http_proxy_type(self):
        opts = HttpProxyOpts(host="proxy.local", port=3128)
        assert opts.type == "http"

    def test_socks5_type(self):
        assert Socks5ProxyOpts().type == "socks5"

    def test_http_proxy_requires_host(self):
        with pytest.raises(ValueError, match="host"):
            HttpProxyOpts(host="", port=3128)

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_http_proxy_port_range(self, port):
        with pytest.raises(ValueError, match="port"):
            HttpProxyOpts(host="proxy.local", port=port)


class TestSslOpts:
    def test_base_defaults(self):
        opts = SslOptsBase()
        assert opts.ca is None
        assert opts.reject_unauthorized is None

    def test_cert_variant_requires_key_and_cert(self):
        with pytest.raises(ValueError, match="key and cert"):
            SslCertOpts(key=b"key")

    def test_pfx_variant_requires_pfx(self):
        with pytest.raises(ValueError, match="pfx"):
            SslPfxOpts(passphrase="secret")

    def test_variants_share_base_fields(self):
        opts = SslCertOpts(ca=b"ca", reject_unauthorized=False, key=b"k", cert=b"c")
        assert isinstance(opts, SslOptsBase)
        assert opts.reject_unauthorized is False


class TestWebClientConfig:
    def test_defaults(self):
        config = WebClientConfig()
        assert config.timeout_ms is None
        assert config.proxy_opts is None
        assert config.ssl_opts is None

    @pytest.mark.parametrize("timeout_ms", [0, -5])
    def test_timeout_must_be_positive(self, timeout_ms):
        with pytest.raises(ValueError, match="timeout_ms"):
            WebClientConfig(timeout_ms=timeout_ms)

    def test_rejects_unknown_proxy(self):
        with pytest.raises(TypeError, match="proxy"):
            WebClientConfig(proxy_opts={"host": "proxy", "port": 1})

    def test_rejects_unknown_ssl(self):
        with pytest.raises(TypeError, match="ssl"):
            WebClientConfig(ssl_opts={"ca": b""})
