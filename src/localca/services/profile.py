# localca/services/profile.py

"""
Declarative extension set for leaf certificates.

A CSRProfile is built once per issuance from a CertificateIdentity and an
IssuanceProfile, and is applied both to the CSR and, explicitly, by the signer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from cryptography import x509

from localca.models.identity import (
    SUBJECT_ATTRIBUTE_OIDS,
    CertificateIdentity,
    IssuanceProfile,
    SubjectAltName,
)
from localca.services.ca_errors import SANRequiredError

log = logging.getLogger(__name__)

# digitalSignature, keyEncipherment for every leaf
LEAF_KEY_USAGE = x509.KeyUsage(
    digital_signature=True,
    key_encipherment=True,
    key_agreement=False,
    data_encipherment=False,
    key_cert_sign=False,
    crl_sign=False,
    content_commitment=False,
    encipher_only=False,
    decipher_only=False
)

LEAF_BASIC_CONSTRAINTS = x509.BasicConstraints(ca=False, path_length=None)


@dataclass(frozen=True)
class CSRProfile:
    subject: x509.Name
    usage: IssuanceProfile
    sans: Tuple[SubjectAltName, ...]

    @property
    def extended_key_usage(self) -> x509.ExtendedKeyUsage:
        return x509.ExtendedKeyUsage(self.usage.extended_key_usages)

    @property
    def subject_alt_name(self) -> Optional[x509.SubjectAlternativeName]:
        if not self.sans:
            return None
        return x509.SubjectAlternativeName([san.to_general_name() for san in self.sans])

    def extensions(self) -> List[Tuple[x509.ExtensionType, bool]]:
        """ (extension, critical) pairs in a fixed order """
        extensions: List[Tuple[x509.ExtensionType, bool]] = [
            (LEAF_BASIC_CONSTRAINTS, False),
            (LEAF_KEY_USAGE, False),
            (self.extended_key_usage, False),
        ]

        san = self.subject_alt_name
        if san is not None:
            extensions.append((san, False))

        return extensions

    def alt_names(self) -> List[Tuple[str, str]]:
        """
        SAN entries numbered per type in the order supplied,
        e.g. [('DNS.1', 'a'), ('IP.1', '10.0.0.1'), ('DNS.2', 'b')]
        """
        counters = {}
        numbered = []

        for san in self.sans:
            counters[san.kind] = counters.get(san.kind, 0) + 1
            numbered.append((f'{san.kind}.{counters[san.kind]}', san.value))

        return numbered


def build_subject(identity: CertificateIdentity) -> x509.Name:
    return x509.Name([
        x509.NameAttribute(SUBJECT_ATTRIBUTE_OIDS[name], value)
        for name, value in identity.subject_attributes()
    ])


def build_csr_profile(
        identity: CertificateIdentity,
        profile: Union[str, IssuanceProfile],
    ) -> CSRProfile:
    """
    Build the extension set for a leaf certificate

    Args:
        identity (CertificateIdentity): Subject and SANs
        profile (str | IssuanceProfile): server, client or both

    Returns:
        CSRProfile

    Raises:
        ProfileValidationError: for an unknown profile
        SANRequiredError: for a server capable profile without SANs
    """
    usage = IssuanceProfile.parse(profile)

    if usage.requires_san and not identity.sans:
        raise SANRequiredError(
            f"The '{usage.value}' profile includes server usage and requires at least "
            "one SAN (e.g. --san DNS:example.local)"
        )

    csr_profile = CSRProfile(
        subject=build_subject(identity),
        usage=usage,
        sans=tuple(identity.sans),
    )

    log.debug("CSR profile for %s: %s, alt_names=%s",
              identity.common_name, usage.value, csr_profile.alt_names())

    return csr_profile
