"""
Private network pre-shared keys.

A private libp2p network only accepts peers holding the same 32-byte key.
The key file has three lines::

    /key/swarm/psk/1.0.0/
    /base16/
    <64 lowercase hex characters>
"""

from __future__ import annotations

import logging
import os
import secrets
from pathlib import Path

from peerswarm.networking.config import SWARM_KEY_BYTES, SWARM_KEY_ENCODING, SWARM_KEY_HEADER
from peerswarm.types import PersistenceError

logger = logging.getLogger(__name__)


def generate_swarm_key() -> str:
    """Generate a new random pre-shared key in key-file format."""
    material = secrets.token_bytes(SWARM_KEY_BYTES)
    return f"{SWARM_KEY_HEADER}\n{SWARM_KEY_ENCODING}\n{material.hex()}"


def write_swarm_key(path: Path, key: str) -> None:
    """
    Replace the key file at `path` with `key`.

    The file is created readable by its owner only.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    path = Path(path)
    try:
        path.unlink(missing_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(key)
    except OSError as e:
        raise PersistenceError(path, "write", str(e), kind="swarm key") from e
    logger.info("Wrote swarm key to %s", path)
