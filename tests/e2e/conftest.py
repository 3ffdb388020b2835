# tests/e2e/conftest.py

import os
import shutil
import stat
import sys
from pathlib import Path

import pytest

pytestmark = pytest.mark.e2e

@pytest.fixture(scope="session")
def localca_bin(pytestconfig, tmp_path_factory):
    """
    Run repo code via `python -m localca` (no PATH reliance).
    Allow override via LOCALCA_BIN.
    """
    override = os.environ.get("LOCALCA_BIN")
    if override:
        p = Path(override)
        if not p.exists():
            pytest.skip(f"LOCALCA_BIN={override} does not exist")
        return str(p.resolve())

    root = Path(pytestconfig.rootpath)
    src_dir = root / "src"
    pkg_main = src_dir / "localca" / "__main__.py"
    if not pkg_main.exists():
        pytest.skip(f"Could not find {pkg_main}. Expected package at src/localca.")

    # shim that sets PYTHONPATH and runs -m localca
    shim = tmp_path_factory.mktemp("localca_shim") / "localca"
    shim.write_text(
        f"#!/usr/bin/env bash\n"
        f"set -euo pipefail\n"
        f'export PYTHONPATH="{src_dir}:{os.environ.get("PYTHONPATH", "")}"\n'
        f'"{sys.executable}" -m localca "$@"\n'
    )
    shim.chmod(shim.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(shim.resolve())

@pytest.fixture(scope="session")
def out_dir(tmp_path_factory):
    """One output directory shared by the ordered tests, like a real workstation."""
    return tmp_path_factory.mktemp("localca") / "certs"

@pytest.fixture(scope="session")
def sops_path():
    path = shutil.which("sops")
    if not path:
        pytest.skip("sops not found on PATH; skipping encryption e2e.")
    return path

@pytest.fixture(scope="session")
def age_recipient():
    recipient = os.environ.get("SOPS_AGE_RECIPIENTS")
    if not recipient:
        pytest.skip("Set SOPS_AGE_RECIPIENTS to run encryption e2e; skipping.")
    return recipient
