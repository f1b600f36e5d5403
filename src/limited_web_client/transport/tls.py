# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
TLS context construction from SslOpts variants.

The stdlib ``ssl`` module loads client certificate chains from files
only, so PEM material is written to a private temporary directory for the
duration of ``load_cert_chain`` and removed right after. PKCS#12 bundles
are converted to PEM with ``cryptography``.
"""

import logging
import os
import ssl
import tempfile

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import pkcs12

from ..exceptions import ConfigurationError
from ..types.options import SslCertOpts, SslOpts, SslOptsBase, SslPfxOpts

logger = logging.getLogger(__name__)


def _load_pem_chain(context: ssl.SSLContext, key: bytes, cert: bytes) -> None:
    with tempfile.TemporaryDirectory(prefix="lwc-tls-") as tmp:
        key_path = os.path.join(tmp, "client.key")
        cert_path = os.path.join(tmp, "client.crt")
        for path, data in ((key_path, key), (cert_path, cert)):
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        context.load_cert_chain(certfile=cert_path, keyfile=key_path)


def pfx_to_pem(pfx: bytes, passphrase: str) -> tuple[bytes, bytes]:
    """
    Convert a PKCS#12 bundle to PEM (key, certificate chain).

    Raises:
        ConfigurationError: If the bundle cannot be decrypted or holds no key
    """
    password = passphrase.encode("utf-8") if passphrase else None
    try:
        private_key, certificate, additional = pkcs12.load_key_and_certificates(
            pfx, password
        )
    except ValueError as e:
        raise ConfigurationError(f"Unable to load pfx bundle: {e}") from e
    if private_key is None or certificate is None:
        raise ConfigurationError("pfx bundle must contain a private key and certificate")

    key_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    chain = [certificate, *(additional or [])]
    cert_pem = b"".join(c.public_bytes(serialization.Encoding.PEM) for c in chain)
    return key_pem, cert_pem


def build_ssl_context(ssl_opts: SslOpts | None) -> ssl.SSLContext:
    """
    Build the client TLS context for https targets.

    Args:
        ssl_opts: TLS variant, or None for the platform defaults

    Returns:
        An SSLContext with the default trust store, the optional CA bundle
        merged in, verification switched per ``reject_unauthorized`` and the
        client certificate chain loaded for the cert and pfx variants.

    Raises:
        ConfigurationError: If the TLS material cannot be loaded
    """
    context = ssl.create_default_context()
    if ssl_opts is None:
        return context

    try:
        if ssl_opts.ca:
            context.load_verify_locations(cadata=ssl_opts.ca.decode("ascii"))
        if ssl_opts.reject_unauthorized is False:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        if isinstance(ssl_opts, SslPfxOpts):
            key_pem, cert_pem = pfx_to_pem(ssl_opts.pfx, ssl_opts.passphrase)
            _load_pem_chain(context, key_pem, cert_pem)
        elif isinstance(ssl_opts, SslCertOpts):
            _load_pem_chain(context, ssl_opts.key, ssl_opts.cert)
        elif not isinstance(ssl_opts, SslOptsBase):
            raise ConfigurationError(f"Unknown ssl options: {type(ssl_opts).__name__}")
    except (ssl.SSLError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Invalid TLS material: {e}") from e

    logger.debug(
        "Built TLS context: variant=%s, verify=%s",
        type(ssl_opts).__name__,
        context.verify_mode != ssl.CERT_NONE,
    )
    return context


__all__ = ["build_ssl_context", "pfx_to_pem"]
