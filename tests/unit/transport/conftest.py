"""Fixtures providing throwaway TLS material."""

import datetime
from dataclasses import dataclass

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID


@dataclass
class TlsMaterial:
    common_name: str
    passphrase: str
    key_pem: bytes
    cert_pem: bytes
    pfx: bytes


@pytest.fixture(scope="session")
def tls_material() -> TlsMaterial:
    """A self-signed CA certificate, its key and a PKCS#12 bundle of both."""
    common_name = "limited-web-client test"
    passphrase = "correct horse"
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    key_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    pfx = pkcs12.serialize_key_and_certificates(
        b"client",
        key,
        cert,
        None,
        serialization.BestAvailableEncryption(passphrase.encode()),
    )
    return TlsMaterial(
        common_name=common_name,
        passphrase=passphrase,
        key_pem=key_pem,
        cert_pem=cert.public_bytes(serialization.Encoding.PEM),
        pfx=pfx,
    )
