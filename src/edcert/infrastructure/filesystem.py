"""Filesystem operations for generated artifacts.

INVARIANT: Artifacts are written once per run and never deleted here.
A failed run leaves whatever was already written in place.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

PRIVATE_KEY_MODE = 0o600


def ensure_directory(path: str | Path) -> Path:
    """Create *path* and any missing ancestors. No-op if it exists."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    logger.debug("Output directory ready: %s", directory)
    return directory


def write_private_key(path: Path, data: bytes) -> None:
    """Write private key material readable by the owner only.

    Overwrites an existing key at *path*.
    """
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, PRIVATE_KEY_MODE)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)
    os.chmod(path, PRIVATE_KEY_MODE)


def write_public_file(path: Path, data: bytes) -> None:
    """Write a CSR or certificate."""
    path.write_bytes(data)
