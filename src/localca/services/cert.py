# localca/services/cert.py

from __future__ import annotations

from datetime import timedelta
from typing import Any, List, Optional

from cryptography import x509
from cryptography.x509.extensions import ExtensionNotFound
from cryptography.x509.oid import ExtendedKeyUsageOID, ExtensionOID, NameOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import Encoding

from localca.services.ca_errors import CryptoBackendError, InvalidCertificateError
from localca.services.profile import CSRProfile
from localca.utils.datetime import format_datetime, now_utc
from localca.utils.files import StrPath, read_bytes

EKU_NAMES = {
    ExtendedKeyUsageOID.SERVER_AUTH: 'serverAuth',
    ExtendedKeyUsageOID.CLIENT_AUTH: 'clientAuth',
}


def generate_private_key(key_size: int) -> rsa.RSAPrivateKey:
    """
    Generate an RSA private key

    Args:
        key_size (int): Modulus size in bits

    Returns:
        rsa.RSAPrivateKey

    Raises:
        CryptoBackendError: if the backend cannot produce the key
    """
    try:
        return rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    except (ValueError, TypeError) as e:
        raise CryptoBackendError(f"Failed to generate a {key_size}-bit RSA key: {e}") from e


def private_key_pem(private_key: rsa.RSAPrivateKey) -> bytes:
    return private_key.private_bytes(
        Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    )


def certificate_pem(certificate: x509.Certificate) -> bytes:
    return certificate.public_bytes(Encoding.PEM)


def csr_pem(csr: x509.CertificateSigningRequest) -> bytes:
    return csr.public_bytes(Encoding.PEM)


def load_private_key(path: StrPath) -> rsa.RSAPrivateKey:
    """ Load an unencrypted PEM private key from disk """
    data = read_bytes(path)

    try:
        return serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError) as e:
        raise InvalidCertificateError(f"Failed to parse private key '{path}'.") from e


def load_certificate(path: StrPath) -> x509.Certificate:
    """ Load a PEM certificate from disk """
    data = read_bytes(path).strip()

    if b"-----BEGIN CERTIFICATE-----" not in data:
        raise InvalidCertificateError(f"'{path}' is not a PEM certificate.")

    try:
        return x509.load_pem_x509_certificate(data)
    except ValueError as e:
        raise InvalidCertificateError(f"Failed to parse PEM certificate '{path}'.") from e


def self_sign_ca(private_key: rsa.RSAPrivateKey, common_name: str, days: int) -> x509.Certificate:
    """
    Self-sign a root CA certificate for `private_key` with subject CN=`common_name`.
    """
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    public_key = private_key.public_key()
    ski = x509.SubjectKeyIdentifier.from_public_key(public_key)
    now = now_utc()

    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=days))
        .add_extension(ski, critical=False)
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_subject_key_identifier(ski),
            critical=False
        )
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=False,
                key_encipherment=False,
                key_agreement=False,
                data_encipherment=False,
                key_cert_sign=True,
                crl_sign=True,
                content_commitment=False,
                encipher_only=False,
                decipher_only=False
            ),
            critical=True
        )
    )

    try:
        return builder.sign(private_key=private_key, algorithm=hashes.SHA256())
    except (ValueError, TypeError) as e:
        raise CryptoBackendError(f"Failed to self-sign the CA certificate: {e}") from e


def generate_csr(private_key: rsa.RSAPrivateKey, profile: CSRProfile) -> x509.CertificateSigningRequest:
    """
    Generate a certificate signing request carrying the profile's subject and extensions
    """
    builder = x509.CertificateSigningRequestBuilder().subject_name(profile.subject)

    for extension, critical in profile.extensions():
        builder = builder.add_extension(extension, critical=critical)

    try:
        return builder.sign(private_key, hashes.SHA256())
    except (ValueError, TypeError) as e:
        raise CryptoBackendError(f"Failed to sign the CSR: {e}") from e


def sign_csr(
        csr: x509.CertificateSigningRequest,
        profile: CSRProfile,
        ca_key: rsa.RSAPrivateKey,
        ca_cert: x509.Certificate,
        days: int,
    ) -> x509.Certificate:
    """
    Sign a CSR with the CA key.

    Only the subject and public key are taken from the CSR; every extension
    comes from `profile`, never from what the CSR asserts about itself.
    """
    if not csr.is_signature_valid:
        raise InvalidCertificateError("CSR signature invalid.")

    public_key = csr.public_key()
    now = now_utc()

    builder = (
        x509.CertificateBuilder()
        .subject_name(csr.subject)
        .issuer_name(ca_cert.subject)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=days))
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False)
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(ca_key.public_key()),
            critical=False
        )
    )

    for extension, critical in profile.extensions():
        builder = builder.add_extension(extension, critical=critical)

    try:
        return builder.sign(private_key=ca_key, algorithm=hashes.SHA256())
    except (ValueError, TypeError) as e:
        raise CryptoBackendError(f"Failed to sign the leaf certificate: {e}") from e


class CertificateBundle:
    """ A certificate and, optionally, the private key it was issued for """
    def __init__(self,
            certificate: x509.Certificate,
            private_key: Optional[rsa.RSAPrivateKey] = None
        ):
        self.certificate = certificate
        self.private_key = private_key

    @classmethod
    def from_files(cls, cert_path: StrPath, key_path: Optional[StrPath] = None) -> "CertificateBundle":
        private_key = load_private_key(key_path) if key_path else None
        return cls(certificate=load_certificate(cert_path), private_key=private_key)

    def get_certificate_attrib(self, attrib: str) -> Any:
        """
        Returns an attribute of the stored certificate

        Args:
            attrib (str): The attribute to return

        Returns:
            The attribute value, or None when the certificate does not carry it
        """
        certificate = self.certificate

        def get_attribute_for_oid(oid):
            attribute = certificate.subject.get_attributes_for_oid(oid)
            return attribute[0].value if attribute else None

        def get_extension(oid):
            try:
                return certificate.extensions.get_extension_for_oid(oid).value
            except ExtensionNotFound:
                return None

        def get_san() -> Optional[List[str]]:
            san = get_extension(ExtensionOID.SUBJECT_ALTERNATIVE_NAME)
            if san is None:
                return None
            return ([f'DNS:{n}' for n in san.get_values_for_type(x509.DNSName)]
                    + [f'IP:{n}' for n in san.get_values_for_type(x509.IPAddress)])

        def get_eku() -> Optional[List[str]]:
            eku = get_extension(ExtensionOID.EXTENDED_KEY_USAGE)
            return [EKU_NAMES.get(oid, oid.dotted_string) for oid in eku] if eku is not None else None

        attrib_map = {
            'cn': lambda: get_attribute_for_oid(NameOID.COMMON_NAME),
            'not_before': lambda: format_datetime(certificate.not_valid_before_utc),
            'not_after': lambda: format_datetime(certificate.not_valid_after_utc),
            'issuer': lambda: certificate.issuer.rfc4514_string(),
            'subject': lambda: certificate.subject.rfc4514_string(),
            'serial': lambda: certificate.serial_number,
            'key_size': lambda: certificate.public_key().key_size,
            'basic_constraints': lambda: get_extension(ExtensionOID.BASIC_CONSTRAINTS),
            'subject_alt_name': get_san,
            'extended_key_usage': get_eku,
        }

        func = attrib_map.get(attrib)

        return func() if func is not None else None

    def is_ca_certificate(self) -> bool:
        constraints = self.get_certificate_attrib('basic_constraints')
        return bool(constraints is not None and constraints.ca)

    def key_matches(self) -> bool:
        """ True when the private key belongs to the certificate """
        if self.private_key is None:
            return False

        return self.private_key.public_key() == self.certificate.public_key()

    def is_valid(self) -> bool:
        """ Key matches (when present) and the certificate is within its validity window """
        if self.private_key is not None and not self.key_matches():
            return False

        return (self.certificate.not_valid_before_utc
                <= now_utc()
                <= self.certificate.not_valid_after_utc)
