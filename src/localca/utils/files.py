# localca/utils/files.py

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Union
import logging
import os
import tempfile

from localca.services.ca_errors import ArtifactNotFoundError, ArtifactWriteError

log = logging.getLogger(__name__)

StrPath = Union[str, Path]

def expand_path(path: StrPath) -> Path:
    """Expand a user-relative path ('~/...') into a Path."""
    return Path(os.path.expanduser(str(path)))

def read_bytes(path: StrPath) -> bytes:
    """Read a file as bytes; raises ArtifactNotFoundError when it cannot be read."""
    file_path = Path(path)

    try:
        return file_path.read_bytes()
    except FileNotFoundError as e:
        raise ArtifactNotFoundError(f"File '{file_path}' not found.") from e
    except PermissionError as e:
        raise ArtifactNotFoundError(f"Permission denied for file '{file_path}'.") from e
    except IsADirectoryError as e:
        raise ArtifactNotFoundError(f"Path '{file_path}' is a directory.") from e
    except OSError as err:
        raise ArtifactNotFoundError(f"I/O error while reading file '{file_path}': {err}") from err

def require_files(*paths: StrPath) -> List[Path]:
    """
    Verify every input a stage depends on exists before the stage acts.

    Raises:
        ArtifactNotFoundError: naming every missing path
    """
    resolved = [Path(p) for p in paths]
    missing = [str(p) for p in resolved if not p.is_file()]

    if missing:
        raise ArtifactNotFoundError(f"Required file(s) not found: {', '.join(missing)}")

    return resolved

def write_bytes(
    path: StrPath,
    data: bytes,
    *,
    overwrite: bool = False,
    create_dirs: bool = False,
    atomic: bool = True,
    mode: int = 0o600,
) -> Path:
    """
    Write bytes to a file, with optional atomic replacement.

    Args:
        path: Destination file path.
        data: Bytes to write.
        overwrite: If False and path exists, abort.
        create_dirs: Create parent directories if needed.
        atomic: Write to a temp file and os.replace() for durability.
        mode: File permission mode to apply to the written file.

    Returns:
        The Path of the written file.

    Raises:
        ArtifactWriteError: on any failure, including an existing file when overwrite is False
    """
    file_path = Path(path)
    parent = file_path.parent

    if file_path.exists() and not overwrite:
        raise ArtifactWriteError(f"File '{file_path}' already exists. Refusing to overwrite.")

    tmp_name = None

    try:
        if create_dirs:
            parent.mkdir(parents=True, exist_ok=True)

        if not atomic:
            file_path.write_bytes(data)
            os.chmod(file_path, mode)
            return file_path

        # Atomic write: temp file in same directory -> fsync -> replace
        with tempfile.NamedTemporaryFile(delete=False, dir=str(parent)) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())

        os.chmod(tmp_name, mode)
        os.replace(tmp_name, file_path)
        tmp_name = None

        return file_path

    except PermissionError as e:
        raise ArtifactWriteError(f"Permission denied for file '{file_path}'.") from e
    except IsADirectoryError as e:
        raise ArtifactWriteError(f"Path '{file_path}' is a directory.") from e
    except FileNotFoundError as e:
        # e.g., parent missing and create_dirs=False
        raise ArtifactWriteError(f"Path '{file_path}' not found.") from e
    except OSError as err:
        raise ArtifactWriteError(f"I/O error while writing file '{file_path}': {err}") from err

    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.remove(tmp_name)

def remove_files(paths: Iterable[StrPath]) -> None:
    """Remove files written earlier in a failed operation."""
    for path in paths:
        try:
            Path(path).unlink()
            log.debug("Removed partial output %s", path)
        except FileNotFoundError:
            pass
