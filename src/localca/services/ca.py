# localca/services/ca.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from cryptography import x509

from localca.constants import (
    DEFAULT_CA_CN,
    DEFAULT_DAYS,
    DEFAULT_KEY_SIZE,
    KEY_FILE_MODE,
    PUBLIC_FILE_MODE,
)
from localca.services.ca_errors import CAError, CAExpiredError, CAKeyMismatchError
from localca.services.cert import (
    CertificateBundle,
    certificate_pem,
    generate_private_key,
    load_certificate,
    load_private_key,
    private_key_pem,
    self_sign_ca,
    sign_csr,
)
from localca.services.profile import CSRProfile
from localca.utils.files import write_bytes

log = logging.getLogger(__name__)

REUSED = 'reused'
GENERATED = 'generated'


class CertificateAuthority:
    """ Class to act as the local root Certificate Authority """
    def __init__(self,
            ca_certbundle: CertificateBundle,
            key_path: Path,
            cert_path: Path,
            key_action: str = REUSED,
            cert_action: str = REUSED,
        ):
        """
        Construct a certificate authority object. Use prepare_cert_authority() to
        reuse or bootstrap one from disk.

        Args:
            ca_certbundle (CertificateBundle): CA certificate and private key
            key_path (Path): Where the CA key lives
            cert_path (Path): Where the CA certificate lives
            key_action (str): Whether the key was reused or generated this run
            cert_action (str): Whether the certificate was reused or generated this run
        """
        if ca_certbundle.private_key is None:
            raise CAError("A CA cannot sign without its private key.")

        self.ca_certbundle = ca_certbundle
        self.key_path = key_path
        self.cert_path = cert_path
        self.key_action = key_action
        self.cert_action = cert_action

    @property
    def certificate(self) -> x509.Certificate:
        return self.ca_certbundle.certificate

    @property
    def common_name(self) -> Optional[str]:
        return self.ca_certbundle.get_certificate_attrib('cn')

    @property
    def reused(self) -> bool:
        return self.key_action == REUSED and self.cert_action == REUSED

    def is_valid(self) -> bool:
        return self.ca_certbundle.is_valid() and self.ca_certbundle.is_ca_certificate()

    def sign_certificate(self,
            csr: x509.CertificateSigningRequest,
            profile: CSRProfile,
            days: int = DEFAULT_DAYS['leaf'],
        ) -> x509.Certificate:
        """
        Sign a CSR, applying the extensions of `profile`
        """
        return sign_csr(
            csr=csr,
            profile=profile,
            ca_key=self.ca_certbundle.private_key,
            ca_cert=self.ca_certbundle.certificate,
            days=days,
        )


def prepare_cert_authority(
        key_path: Path,
        cert_path: Path,
        common_name: str = DEFAULT_CA_CN,
        days: int = DEFAULT_DAYS['ca'],
        key_size: int = DEFAULT_KEY_SIZE['ca'],
    ) -> CertificateAuthority:
    """
    Reuse the CA at `key_path`/`cert_path`, generating only what is absent.

    Existing files are never overwritten, even when `common_name` differs from
    the subject of the existing CA certificate. A caller wanting another CA
    must point at other paths.

    Raises:
        CAKeyMismatchError: certificate present without its key, or not made for that key
        CAExpiredError: the existing CA certificate is expired or not yet valid
        CryptoBackendError: key generation or self-signing failed (nothing is written)
    """
    key_exists = key_path.is_file()
    cert_exists = cert_path.is_file()

    if cert_exists and not key_exists:
        raise CAKeyMismatchError(
            f"CA certificate '{cert_path}' exists but its key '{key_path}' does not. "
            "Refusing to generate a new key for an existing certificate."
        )

    if key_exists:
        log.debug("Reusing CA key %s", key_path)
        private_key = load_private_key(key_path)
        key_action = REUSED
    else:
        log.info("Generating %d-bit CA key at %s", key_size, key_path)
        private_key = generate_private_key(key_size)
        key_action = GENERATED

    if cert_exists:
        log.debug("Reusing CA certificate %s", cert_path)
        certificate = load_certificate(cert_path)
        cert_action = REUSED
    else:
        log.info("Self-signing CA certificate CN=%s for %d days", common_name, days)
        certificate = self_sign_ca(private_key, common_name, days)
        cert_action = GENERATED

    bundle = CertificateBundle(certificate=certificate, private_key=private_key)

    if not bundle.key_matches():
        raise CAKeyMismatchError(
            f"CA certificate '{cert_path}' was not issued for the key '{key_path}'."
        )

    if not bundle.is_ca_certificate():
        raise CAKeyMismatchError(f"'{cert_path}' is not a CA certificate.")

    if cert_exists and not bundle.is_valid():
        raise CAExpiredError(
            f"CA certificate '{cert_path}' is not valid now (valid "
            f"{bundle.get_certificate_attrib('not_before')} to "
            f"{bundle.get_certificate_attrib('not_after')}). "
            "Move the expired CA aside or use another --out-dir to bootstrap a new one."
        )

    if cert_exists and common_name != bundle.get_certificate_attrib('cn'):
        log.warning("Existing CA '%s' kept; requested CN '%s' ignored",
                    bundle.get_certificate_attrib('cn'), common_name)

    # Both writes refuse to replace an existing file
    if key_action == GENERATED:
        write_bytes(key_path, private_key_pem(private_key),
                    overwrite=False, create_dirs=True, mode=KEY_FILE_MODE)

    if cert_action == GENERATED:
        write_bytes(cert_path, certificate_pem(certificate),
                    overwrite=False, create_dirs=True, mode=PUBLIC_FILE_MODE)

    return CertificateAuthority(
        ca_certbundle=bundle,
        key_path=key_path,
        cert_path=cert_path,
        key_action=key_action,
        cert_action=cert_action,
    )
