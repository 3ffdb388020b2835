# localca/utils/process.py

from __future__ import annotations

import logging
import subprocess
from typing import Optional, Sequence

log = logging.getLogger(__name__)


def run_command(
        command: Sequence[str],
        *,
        text: bool = True,
        env_vars: Optional[dict] = None
    ) -> subprocess.CompletedProcess:
    """
    Run a command and capture the output.

    FileNotFoundError propagates when the binary is missing so callers can map it.
    """
    log.debug("Running: %s", " ".join(command))

    return subprocess.run(
        list(command),
        env=env_vars,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=text,
        check=False
    )


def stderr_text(result: subprocess.CompletedProcess) -> str:
    """ Best effort message from a failed command """
    msg = result.stderr or result.stdout or b""
    if isinstance(msg, bytes):
        msg = msg.decode("utf-8", errors="replace")
    return msg.strip()
