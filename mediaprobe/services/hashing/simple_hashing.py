from __future__ import annotations

import hashlib
from pathlib import Path

from mediaprobe.domain.ports.hashing import HashingPort


class SimpleHashing(HashingPort):
    """
    Streaming SHA-256 file hasher. Memory efficient for large files.

    fingerprint() is "<sha256>_<mtime_ns>": it changes when either the
    content or the modification time changes.
    """

    def __init__(self, chunk_size: int = 1024 * 1024) -> None:
        self.chunk_size = chunk_size

    def sha256_file(self, path: Path) -> str:
        if not isinstance(path, Path):
            path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"File to hash not found: {path}")

        h = hashlib.sha256()
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(self.chunk_size), b""):
                h.update(chunk)
        return h.hexdigest()

    def fingerprint(self, path: Path) -> str:
        if not isinstance(path, Path):
            path = Path(path)
        digest = self.sha256_file(path)
        return f"{digest}_{path.stat().st_mtime_ns}"
