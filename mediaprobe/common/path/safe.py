# mediaprobe/common/path/safe.py
from __future__ import annotations

import os
from pathlib import Path

from mediaprobe.domain.errors import MediaNotFoundError, MediaNotReadableError


def resolve_media_path(path: Path | str) -> Path:
    """
    Resolve a media file to its canonical absolute path.
    Raises MediaNotFoundError if no regular file lives there and
    MediaNotReadableError if it cannot be opened for reading.
    """
    p = Path(path).expanduser().resolve()
    if not p.is_file():
        raise MediaNotFoundError(f"File not found: {path}", path=str(path))
    if not os.access(p, os.R_OK):
        raise MediaNotReadableError(f"File is not readable: {path}", path=str(path))
    return p
