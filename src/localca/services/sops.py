# localca/services/sops.py

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from localca.constants import DEFAULT_SOPS_CONF, KEY_FILE_MODE, SOPS_BIN
from localca.services.sops_errors import (
    EncryptionFailedError,
    SopsNotFoundError,
    SopsPreconditionError,
)
from localca.utils.files import StrPath, expand_path, require_files, write_bytes
from localca.utils.process import run_command, stderr_text

log = logging.getLogger(__name__)

YAML_SUFFIXES = ('.yaml', '.yml')


@dataclass(frozen=True)
class SopsConfig:
    """ Explicit configuration for the SOPS backend, resolved once per run """
    binary: str = SOPS_BIN
    recipients: Optional[str] = None
    key_file: Optional[Path] = None

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "SopsConfig":
        """
        Read the age recipients and key file location from the environment

        Args:
            environ (Mapping): Environment to read, defaults to os.environ
        """
        env = os.environ if environ is None else environ

        recipients = (env.get(DEFAULT_SOPS_CONF['recipients_env']) or '').strip() or None
        key_file = env.get(DEFAULT_SOPS_CONF['key_file_env']) or DEFAULT_SOPS_CONF['key_file']

        return cls(recipients=recipients, key_file=expand_path(key_file))

    @property
    def has_key_file(self) -> bool:
        return self.key_file is not None and self.key_file.is_file()


@dataclass(frozen=True)
class Artifact:
    """ A plaintext file eligible for encryption """
    path: Path
    yaml: bool = False

    @classmethod
    def of(cls, path: StrPath) -> "Artifact":
        path = Path(path)
        return cls(path=path, yaml=path.suffix in YAML_SUFFIXES)

    @property
    def sibling(self) -> Path:
        """ The encrypted sibling path, e.g. key.pem.sops or secret.yaml.sops.yaml """
        suffix = DEFAULT_SOPS_CONF['yaml_suffix'] if self.yaml else DEFAULT_SOPS_CONF['suffix']
        return self.path.with_name(self.path.name + suffix)


class Sops:
    """ Thin class to act on the sops CLI """
    def __init__(self, config: SopsConfig):
        self.config = config

        binary = config.binary
        if os.path.isabs(binary) and os.path.isfile(binary) and os.access(binary, os.X_OK):
            resolved = binary
        else:
            resolved = shutil.which(binary)

        if not resolved:
            raise SopsNotFoundError(
                f"sops binary not found: {binary!r}. Install sops or drop --emit-sops."
            )

        self.bin = resolved

    def _env(self) -> dict:
        env = dict(os.environ)
        if self.config.has_key_file:
            env[DEFAULT_SOPS_CONF['key_file_env']] = str(self.config.key_file)
        return env

    def encrypt(self, source: Path, yaml_type: bool = False) -> bytes:
        """
        Encrypt a file and return the ciphertext document

        Raises:
            EncryptionFailedError: sops exited non-zero
        """
        cmd = [self.bin, '--encrypt']

        if self.config.recipients:
            cmd.extend(['--age', self.config.recipients])

        if yaml_type:
            cmd.extend(['--input-type', 'yaml', '--output-type', 'yaml'])

        cmd.append(str(source))

        try:
            result = run_command(cmd, text=False, env_vars=self._env())
        except FileNotFoundError as e:
            raise SopsNotFoundError(f"sops binary not found: {self.bin!r}") from e

        if result.returncode != 0:
            raise EncryptionFailedError(
                f"Failed to encrypt '{source}': {stderr_text(result) or 'sops exited with ' + str(result.returncode)}"
            )

        return result.stdout


class EncryptionPipeline:
    """ Produce encrypted siblings of plaintext artifacts, never touching the originals """
    def __init__(self, config: SopsConfig):
        self.config = config
        self._sops: Optional[Sops] = None

    def check_preconditions(self) -> Sops:
        """
        Validated once, before any file is touched.

        Raises:
            SopsPreconditionError: neither recipients nor a local age key file
            SopsNotFoundError: sops is not installed
        """
        if not self.config.recipients and not self.config.has_key_file:
            raise SopsPreconditionError(
                f"{DEFAULT_SOPS_CONF['recipients_env']} not set and no age keys found at "
                f"{self.config.key_file}"
            )

        if self._sops is None:
            self._sops = Sops(self.config)

        return self._sops

    def run(self, artifacts: Sequence[Artifact]) -> List[Path]:
        """
        Encrypt each artifact in order, stopping at the first failure.

        Siblings written before a failure are left in place.

        Returns:
            The encrypted sibling paths
        """
        sops = self.check_preconditions()
        written: List[Path] = []

        for artifact in artifacts:
            require_files(artifact.path)

            ciphertext = sops.encrypt(artifact.path, yaml_type=artifact.yaml)
            written.append(write_bytes(artifact.sibling, ciphertext,
                                       overwrite=True, mode=KEY_FILE_MODE))
            log.debug("Encrypted %s -> %s", artifact.path, artifact.sibling)

        return written
