# localca/services/emitters.py

"""
Consumer specific encodings of a (leaf certificate, leaf key, CA certificate) triple.

Emitters check that their inputs exist, write their outputs in full and never
read back what they wrote.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Tuple

import yaml

from localca.constants import DEFAULT_STORAGE_CONF, KEY_FILE_MODE, PUBLIC_FILE_MODE
from localca.utils.files import StrPath, read_bytes, require_files, write_bytes

log = logging.getLogger(__name__)


def _b64(path: Path) -> str:
    return base64.b64encode(read_bytes(path)).decode('ascii')


def build_k8s_secret(name: str, namespace: str, cert: Path, key: Path, ca: Path) -> dict:
    """ Kubernetes TLS secret manifest with base64 encoded PEM blobs """
    return {
        'apiVersion': 'v1',
        'kind': 'Secret',
        'metadata': {
            'name': name,
            'namespace': namespace,
        },
        'type': 'kubernetes.io/tls',
        'data': {
            'tls.crt': _b64(cert),
            'tls.key': _b64(key),
            'ca.crt': _b64(ca),
        },
    }


def emit_k8s_secret(
        name: str,
        namespace: str,
        out_path: StrPath,
        cert_path: StrPath,
        key_path: StrPath,
        ca_cert_path: StrPath,
    ) -> Path:
    """
    Write a Kubernetes TLS secret manifest, replacing any existing document.

    Returns:
        Path of the manifest

    Raises:
        ArtifactNotFoundError: if any input is missing
    """
    cert, key, ca = require_files(cert_path, key_path, ca_cert_path)

    manifest = build_k8s_secret(name, namespace, cert, key, ca)
    document = yaml.safe_dump(manifest, sort_keys=False, default_flow_style=False)

    log.debug("Writing secret %s/%s to %s", namespace, name, out_path)

    # The manifest embeds the private key
    return write_bytes(out_path, document.encode('utf-8'),
                       overwrite=True, create_dirs=True, mode=KEY_FILE_MODE)


def emit_traefik_bundle(
        cert_path: StrPath,
        ca_cert_path: StrPath,
        key_path: StrPath,
        out_dir: StrPath,
    ) -> Tuple[Path, Path]:
    """
    Write a proxy bundle: leaf then CA in the chain file, and a copy of the key.

    Returns:
        (chain path, key path)

    Raises:
        ArtifactNotFoundError: if any input is missing
    """
    cert, ca, key = require_files(cert_path, ca_cert_path, key_path)
    bundle_dir = Path(out_dir)

    cert_pem = read_bytes(cert)
    if not cert_pem.endswith(b'\n'):
        cert_pem += b'\n'

    chain = write_bytes(bundle_dir / DEFAULT_STORAGE_CONF['bundle_chain_file'],
                        cert_pem + read_bytes(ca),
                        overwrite=True, create_dirs=True, mode=PUBLIC_FILE_MODE)
    key_copy = write_bytes(bundle_dir / DEFAULT_STORAGE_CONF['bundle_key_file'],
                           read_bytes(key),
                           overwrite=True, create_dirs=True, mode=KEY_FILE_MODE)

    log.debug("Wrote bundle %s and %s", chain, key_copy)

    return chain, key_copy
