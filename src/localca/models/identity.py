# localca/models/identity.py

from __future__ import annotations

import ipaddress
from enum import Enum
from typing import Iterable, List, Literal, Optional, Tuple, Union

from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID
from pydantic import BaseModel, ConfigDict

from localca.services.ca_errors import ProfileValidationError

# Short names accepted in '/O=Org/OU=Unit' style subjects, mapped to their OIDs
SUBJECT_ATTRIBUTE_OIDS = {
    'CN': NameOID.COMMON_NAME,
    'O': NameOID.ORGANIZATION_NAME,
    'OU': NameOID.ORGANIZATIONAL_UNIT_NAME,
    'C': NameOID.COUNTRY_NAME,
    'ST': NameOID.STATE_OR_PROVINCE_NAME,
    'L': NameOID.LOCALITY_NAME,
    'emailAddress': NameOID.EMAIL_ADDRESS,
}


class IssuanceProfile(str, Enum):
    """ Usage class of a leaf certificate """
    SERVER = 'server'
    CLIENT = 'client'
    BOTH = 'both'

    @classmethod
    def parse(cls, value: Union[str, "IssuanceProfile"]) -> "IssuanceProfile":
        """
        Resolve a profile name. There is no default: unknown names are rejected.

        Raises:
            ProfileValidationError: for anything other than server, client or both
        """
        if isinstance(value, cls):
            return value

        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ', '.join(p.value for p in cls)
            raise ProfileValidationError(
                f"Invalid profile {value!r}. Expected one of: {valid}"
            ) from None

    @property
    def extended_key_usages(self) -> List[x509.ObjectIdentifier]:
        return {
            IssuanceProfile.SERVER: [ExtendedKeyUsageOID.SERVER_AUTH],
            IssuanceProfile.CLIENT: [ExtendedKeyUsageOID.CLIENT_AUTH],
            IssuanceProfile.BOTH: [ExtendedKeyUsageOID.SERVER_AUTH,
                                   ExtendedKeyUsageOID.CLIENT_AUTH],
        }[self]

    @property
    def requires_san(self) -> bool:
        """ Server certificates without a SAN are rejected by modern TLS clients """
        return self in (IssuanceProfile.SERVER, IssuanceProfile.BOTH)


class SubjectAltName(BaseModel):
    """ A single 'DNS:name' or 'IP:address' entry """
    model_config = ConfigDict(frozen=True)

    kind: Literal['DNS', 'IP']
    value: str

    @classmethod
    def from_string(cls, text: str) -> "SubjectAltName":
        """
        Parse 'DNS:example.local' or 'IP:10.0.0.1'.

        Raises:
            ProfileValidationError: on a missing or unsupported type prefix, or a bad IP
        """
        kind, sep, value = text.partition(':')
        kind = kind.strip().upper()
        value = value.strip()

        if not sep or not value:
            raise ProfileValidationError(
                f"Invalid SAN {text!r}. Expected DNS:<name> or IP:<address>"
            )

        if kind not in ('DNS', 'IP'):
            raise ProfileValidationError(f"Unsupported SAN type {kind!r} in {text!r}")

        if kind == 'IP':
            try:
                ipaddress.ip_address(value)
            except ValueError:
                raise ProfileValidationError(f"Invalid IP address in SAN {text!r}") from None
        else:
            try:
                x509.DNSName(value)
            except ValueError:
                raise ProfileValidationError(
                    f"Invalid DNS name in SAN {text!r}. Internationalised names must be "
                    "given in their ASCII (xn--) form"
                ) from None

        return cls(kind=kind, value=value)

    def to_general_name(self) -> x509.GeneralName:
        if self.kind == 'IP':
            return x509.IPAddress(ipaddress.ip_address(self.value))
        return x509.DNSName(self.value)

    def __str__(self) -> str:
        return f'{self.kind}:{self.value}'


class CertificateIdentity(BaseModel):
    """
    Subject and SAN list of a leaf certificate.

    `attributes` holds the extra subject attributes in the order given;
    the Common Name is always placed first when the subject is built.
    """
    model_config = ConfigDict(frozen=True)

    common_name: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    sans: Tuple[SubjectAltName, ...] = ()

    @classmethod
    def from_strings(
            cls,
            common_name: str,
            subject_extra: Optional[str] = None,
            sans: Optional[Iterable[str]] = None,
        ) -> "CertificateIdentity":
        """
        Build an identity from CLI style values

        Args:
            common_name (str): The leaf Common Name
            subject_extra (str): Extra attributes in '/O=Org/OU=Unit/C=US' form
            sans (list): Entries like 'DNS:example.local' or 'IP:127.0.0.1'
        """
        if not common_name or not common_name.strip():
            raise ProfileValidationError("A Common Name is required.")

        return cls(
            common_name=common_name.strip(),
            attributes=tuple(parse_subject(subject_extra or '')),
            sans=tuple(SubjectAltName.from_string(s) for s in (sans or [])),
        )

    def subject_attributes(self) -> List[Tuple[str, str]]:
        """ Ordered (short name, value) pairs, CN first """
        return [('CN', self.common_name), *self.attributes]

    def subject_string(self) -> str:
        return ''.join(f'/{name}={value}' for name, value in self.subject_attributes())


def parse_subject(subject: str) -> List[Tuple[str, str]]:
    """
    Split a '/O=Org/OU=Unit' subject on '/' into ordered (name, value) pairs.

    Raises:
        ProfileValidationError: for malformed parts, unknown names, or a repeated CN
    """
    pairs: List[Tuple[str, str]] = []

    for part in subject.split('/'):
        part = part.strip()
        if not part:
            continue

        name, sep, value = part.partition('=')
        name = name.strip()
        value = value.strip()

        if not sep or not value:
            raise ProfileValidationError(f"Invalid subject attribute {part!r}")

        if name not in SUBJECT_ATTRIBUTE_OIDS:
            raise ProfileValidationError(f"Unsupported subject attribute {name!r}")

        if name == 'CN':
            raise ProfileValidationError("The Common Name is set with --cn, not the extra subject.")

        if name == 'C' and len(value) != 2:
            raise ProfileValidationError(f"Country must be a two letter code, got {value!r}")

        pairs.append((name, value))

    return pairs
