# localca/models/layout.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from localca.constants import DEFAULT_K8S_CONF, DEFAULT_STORAGE_CONF
from localca.utils.files import StrPath, expand_path


@dataclass(frozen=True)
class OutputPaths:
    """ Where each artifact of an invocation lives """
    out_dir: Path
    ca_key: Path
    ca_cert: Path
    leaf_key: Path
    leaf_cert: Path
    csr: Path

    @classmethod
    def build(cls, out_dir: StrPath, root_ca_key: Optional[StrPath] = None) -> "OutputPaths":
        base = expand_path(out_dir)
        conf = DEFAULT_STORAGE_CONF

        return cls(
            out_dir=base,
            ca_key=expand_path(root_ca_key) if root_ca_key else base / conf['ca_key_file'],
            ca_cert=base / conf['ca_cert_file'],
            leaf_key=base / conf['leaf_key_file'],
            leaf_cert=base / conf['leaf_cert_file'],
            csr=base / conf['csr_file'],
        )

    def secret_manifest(self, name: str) -> Path:
        return self.out_dir / f"{name}{DEFAULT_K8S_CONF['secret_suffix']}"
