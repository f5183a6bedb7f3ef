from __future__ import annotations
from enum import StrEnum
from typing import Optional


class AudioLayout(StrEnum):
    mono = "mono"
    stereo = "stereo"
    surround_5_1 = "5.1"

    @property
    def channel_count(self) -> int:
        return _CHANNELS[self]

    @classmethod
    def from_token(cls, token: str | None) -> Optional["AudioLayout"]:
        """Map a layout token as printed by ffmpeg ("Stereo", "mono", "5.1") to a member."""
        if not token:
            return None
        try:
            return cls(token.strip().lower())
        except ValueError:
            return None


_CHANNELS = {
    AudioLayout.mono: 1,
    AudioLayout.stereo: 2,
    AudioLayout.surround_5_1: 6,
}
