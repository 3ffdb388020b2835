# localca/services/issuer.py

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from cryptography import x509

from localca.constants import DEFAULT_DAYS, DEFAULT_KEY_SIZE, KEY_FILE_MODE, PUBLIC_FILE_MODE
from localca.models.identity import CertificateIdentity, IssuanceProfile
from localca.services.ca import CertificateAuthority
from localca.services.ca_errors import ArtifactWriteError
from localca.services.cert import (
    certificate_pem,
    csr_pem,
    generate_csr,
    generate_private_key,
    private_key_pem,
)
from localca.services.profile import build_csr_profile
from localca.utils.files import remove_files, write_bytes

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedLeaf:
    key_path: Path
    cert_path: Path
    csr_path: Optional[Path]
    certificate: x509.Certificate


class LeafIssuer:
    """ Issues leaf certificates signed by a CertificateAuthority """
    def __init__(self,
            ca: CertificateAuthority,
            key_size: int = DEFAULT_KEY_SIZE['leaf'],
            days: int = DEFAULT_DAYS['leaf'],
        ):
        self.ca = ca
        self.key_size = key_size
        self.days = days

    def issue(self,
            identity: CertificateIdentity,
            profile: Union[str, IssuanceProfile],
            key_path: Path,
            cert_path: Path,
            csr_path: Optional[Path] = None,
        ) -> IssuedLeaf:
        """
        Generate a key, CSR and CA-signed certificate for `identity`.

        The profile is validated before any key is generated. Outputs are staged
        in a scratch directory beside `cert_path` and moved into place only once
        every step has succeeded; the scratch directory is removed on every exit.

        Args:
            identity (CertificateIdentity): Subject and SANs
            profile (str | IssuanceProfile): server, client or both
            key_path (Path): Destination of the leaf private key
            cert_path (Path): Destination of the leaf certificate
            csr_path (Path): Destination of the CSR, or None to discard it

        Returns:
            IssuedLeaf

        Raises:
            ProfileValidationError, SANRequiredError: invalid request, nothing generated
            CryptoBackendError: key generation or signing failed
            ArtifactWriteError: outputs could not be written
        """
        csr_profile = build_csr_profile(identity, profile)

        log.info("Generating %d-bit leaf key for %s", self.key_size, identity.common_name)
        private_key = generate_private_key(self.key_size)
        csr = generate_csr(private_key, csr_profile)
        certificate = self.ca.sign_certificate(csr, csr_profile, days=self.days)

        outputs: List[Tuple[Path, bytes, int]] = [
            (key_path, private_key_pem(private_key), KEY_FILE_MODE),
        ]
        if csr_path is not None:
            outputs.append((csr_path, csr_pem(csr), PUBLIC_FILE_MODE))
        outputs.append((cert_path, certificate_pem(certificate), PUBLIC_FILE_MODE))

        self._commit(outputs)

        return IssuedLeaf(
            key_path=key_path,
            cert_path=cert_path,
            csr_path=csr_path,
            certificate=certificate,
        )

    @staticmethod
    def _commit(outputs: List[Tuple[Path, bytes, int]]) -> None:
        """ Stage every output in a scratch directory, then move them into place """
        destination_dir = outputs[0][0].parent
        destination_dir.mkdir(parents=True, exist_ok=True)

        placed: List[Path] = []

        with tempfile.TemporaryDirectory(prefix='.localca-', dir=str(destination_dir)) as scratch:
            staged = []
            for index, (path, data, mode) in enumerate(outputs):
                staged_path = write_bytes(Path(scratch) / f"{index}-{path.name}", data,
                                          overwrite=True, atomic=False, mode=mode)
                staged.append((staged_path, path))

            try:
                for staged_path, path in staged:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    os.replace(staged_path, path)
                    placed.append(path)
            except OSError as err:
                remove_files(placed)
                raise ArtifactWriteError(f"Failed to place leaf outputs: {err}") from err
