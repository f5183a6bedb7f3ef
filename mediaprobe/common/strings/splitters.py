# mediaprobe/common/strings/splitters.py
from __future__ import annotations

from typing import List

_OPEN = "(["
_CLOSE = ")]"


def split_top_level(v: str | None, sep: str = ",") -> List[str]:
    """
    Split on `sep` but not inside (...) or [...], then trim each part.
    Empty parts are kept so positions stay meaningful to callers.

        "h264 (High), yuv420p(tv, bt709), 1920x1080"
        -> ["h264 (High)", "yuv420p(tv, bt709)", "1920x1080"]
    """
    if v is None:
        return []
    parts: List[str] = []
    depth = 0
    buf: List[str] = []
    for ch in v:
        if ch in _OPEN:
            depth += 1
        elif ch in _CLOSE and depth > 0:
            depth -= 1
        if ch == sep and depth == 0:
            parts.append("".join(buf).strip())
            buf = []
            continue
        buf.append(ch)
    parts.append("".join(buf).strip())
    return parts
