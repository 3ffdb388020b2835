# tests/e2e/helpers.py

import os
import subprocess
import sys

import pytest

def run_localca(localca_bin, out_dir, *args, env=None):
    cmd = [localca_bin, "--out-dir", str(out_dir), *args]
    if localca_bin.endswith(".py"):
        cmd = [sys.executable, *cmd]
    run_env = dict(os.environ)
    if env:
        run_env.update(env)
    return subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                          text=True, env=run_env)

def assert_ok(res, step_desc):
    if res.returncode != 0:
        pytest.fail(f"{step_desc} FAILED (code {res.returncode})\n--- output ---\n{res.stdout}\n--------------")

def assert_code(res, code, step_desc):
    if res.returncode != code:
        pytest.fail(f"{step_desc}: expected code {code}, got {res.returncode}\n"
                    f"--- output ---\n{res.stdout}\n--------------")
