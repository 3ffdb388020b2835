# tests/unit/conftest.py

from datetime import timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.x509.oid import NameOID

from localca.models import CertificateIdentity, OutputPaths
from localca.services.ca import prepare_cert_authority
from localca.services.cert import certificate_pem, generate_private_key, private_key_pem
from localca.services.issuer import LeafIssuer
from localca.utils.datetime import now_utc

# Smaller CA keys keep the suite quick; sizes are asserted separately
TEST_CA_KEY_SIZE = 2048


@pytest.fixture
def paths(tmp_path):
    return OutputPaths.build(tmp_path / "certs")


@pytest.fixture
def ca(paths):
    return prepare_cert_authority(
        key_path=paths.ca_key,
        cert_path=paths.ca_cert,
        common_name="Test Root CA",
        key_size=TEST_CA_KEY_SIZE,
    )


@pytest.fixture
def identity():
    return CertificateIdentity.from_strings(
        common_name="example.local",
        sans=["DNS:example.local"],
    )


@pytest.fixture
def issued(ca, paths, identity):
    """A leaf issued into `paths` with the server profile."""
    return LeafIssuer(ca).issue(
        identity, "server",
        key_path=paths.leaf_key,
        cert_path=paths.leaf_cert,
        csr_path=paths.csr,
    )


@pytest.fixture
def expired_ca(paths):
    """A CA key and a CA:TRUE certificate for it that expired yesterday."""
    key = generate_private_key(TEST_CA_KEY_SIZE)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Expired Root CA")])
    now = now_utc()

    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=30))
        .not_valid_after(now - timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )

    paths.out_dir.mkdir(parents=True, exist_ok=True)
    paths.ca_key.write_bytes(private_key_pem(key))
    paths.ca_cert.write_bytes(certificate_pem(cert))
    return paths
