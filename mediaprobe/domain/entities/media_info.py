# mediaprobe/domain/entities/media_info.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from mediaprobe.domain.entities.time_offset import TimeOffset
from mediaprobe.domain.enums.audio_layout import AudioLayout
from mediaprobe.domain.enums.media_kind import MediaKind

# Reported by ffmpeg as "bitrate: N/A". Kept as a value distinct from None
# (no bitrate announcement at all); do not collapse the two.
BITRATE_UNKNOWN = -1


def _freeze(obj: object, *names: str) -> None:
    # copies each mapping field into a read-only view
    for name in names:
        object.__setattr__(obj, name, MappingProxyType(dict(getattr(obj, name) or {})))


def _plain(obj: object) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields(obj):
        v = getattr(obj, f.name)
        out[f.name] = dict(v) if isinstance(v, Mapping) else v
    return out


@dataclass(frozen=True)
class VideoStream:
    """
    First video stream of a file, as described by its ffmpeg stream line.

    time_bases maps "fps" / "tbr" / "tbc" / "tbn" to the rate printed by
    ffmpeg ("1k" already expanded to 1000.0). frame_rate prefers fps over
    tbr. frame_count is only set when the file duration is known too.
    time_bases and metadata are read-only views.
    """
    width: Optional[int] = None
    height: Optional[int] = None
    time_bases: Mapping[str, float] = field(default_factory=dict)
    frame_rate: Optional[float] = None
    frame_count: Optional[int] = None
    pixel_aspect_ratio: Optional[str] = None
    display_aspect_ratio: Optional[str] = None
    pixel_format: Optional[str] = None
    codec: Optional[str] = None
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze(self, "time_bases", "metadata")

    def as_dict(self) -> Dict[str, Any]:
        return _plain(self)


@dataclass(frozen=True)
class AudioStream:
    """First audio stream of a file."""
    layout: Optional[AudioLayout] = None
    channel_count: Optional[int] = None
    sample_rate_hz: Optional[float] = None
    bitrate_kbps: Optional[float] = None
    codec: Optional[str] = None
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze(self, "metadata")

    def as_dict(self) -> Dict[str, Any]:
        return _plain(self)


@dataclass(frozen=True)
class MediaInfo:
    """
    Everything extracted from one probe of one file.

    Unset fields are None. The single exception is `bitrate`, which is
    BITRATE_UNKNOWN (-1) when ffmpeg printed "bitrate: N/A".
    """
    kind: MediaKind = MediaKind.unknown
    duration: Optional[TimeOffset] = None
    bitrate: Optional[int] = None
    start: Optional[TimeOffset] = None
    video: Optional[VideoStream] = None
    audio: Optional[AudioStream] = None

    @property
    def has_video(self) -> bool:
        return self.video is not None

    @property
    def has_audio(self) -> bool:
        return self.audio is not None

    def as_dict(self) -> Dict[str, Any]:
        audio = self.audio.as_dict() if self.audio else None
        if audio and self.audio.layout:
            audio["layout"] = str(self.audio.layout)
        return {
            "kind": str(self.kind),
            "duration": self.duration.seconds if self.duration else None,
            "bitrate": self.bitrate,
            "start": self.start.seconds if self.start else None,
            "video": self.video.as_dict() if self.video else None,
            "audio": audio,
        }
