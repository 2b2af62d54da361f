"""Content fingerprint used as the registry lookup key."""

from __future__ import annotations

import hashlib
from pathlib import Path


def fingerprint_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def fingerprint_file(path: str | Path) -> str:
    """Return the lowercase hex SHA-256 digest of the whole file.

    The file is read into memory in one go; LoRA files are bounded in size.

    Raises:
        OSError: If the file cannot be read.
    """
    return fingerprint_bytes(Path(path).read_bytes())
