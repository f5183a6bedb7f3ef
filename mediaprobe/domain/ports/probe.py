from __future__ import annotations
from pathlib import Path
from typing import Protocol, Sequence


class ProberPort(Protocol):
    """Runs the external probing tool and returns its diagnostic output, line by line."""
    def probe(self, path: Path) -> Sequence[str]: ...


class ImageProbePort(Protocol):
    def looks_like_image(self, path: Path) -> bool: ...
