# tests/conftest.py
from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Dict, List

import pytest

from mediaprobe.common.settings import get_settings
from mediaprobe.services.probe.media_parser import MediaParser
from mediaprobe.services.probe.raw_text import RawProbeText


class FakeProber:
    """ProberPort double: returns canned output per file name and records calls."""

    def __init__(self, output: str | Dict[str, str] = "", delay: float = 0.0) -> None:
        self.output = output
        self.delay = delay
        self.calls: List[Path] = []
        self._lock = threading.Lock()

    def probe(self, path: Path) -> List[str]:
        with self._lock:
            self.calls.append(Path(path))
        if self.delay:
            time.sleep(self.delay)
        if isinstance(self.output, dict):
            return self.output.get(Path(path).name, "").splitlines()
        return self.output.splitlines()


class FakeImageProbe:
    def __init__(self, answer: bool = False) -> None:
        self.answer = answer
        self.calls: List[Path] = []

    def looks_like_image(self, path: Path) -> bool:
        self.calls.append(Path(path))
        return self.answer


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def media_file(tmp_path) -> Path:
    f = tmp_path / "clip.mp4"
    f.write_bytes(b"\x00\x00\x00\x18ftypisom fake payload")
    return f


@pytest.fixture()
def make_parser():
    """Factory: make_parser(output, image=False) -> (parser, prober, image_probe)."""

    def _make(output: str | Dict[str, str], image: bool = False, delay: float = 0.0):
        prober = FakeProber(output, delay=delay)
        image_probe = FakeImageProbe(image)
        parser = MediaParser(raw=RawProbeText(prober=prober), image_probe=image_probe)
        return parser, prober, image_probe

    return _make
