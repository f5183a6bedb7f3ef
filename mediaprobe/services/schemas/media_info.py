# mediaprobe/services/schemas/media_info.py
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from mediaprobe.domain.enums.audio_layout import AudioLayout
from mediaprobe.domain.enums.media_kind import MediaKind


class VideoStreamRead(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: Optional[int] = Field(None, ge=1)
    height: Optional[int] = Field(None, ge=1)
    time_bases: Dict[str, float] = Field(default_factory=dict)
    frame_rate: Optional[float] = Field(None, ge=0)
    frame_count: Optional[int] = Field(None, ge=0)
    pixel_aspect_ratio: Optional[str] = None
    display_aspect_ratio: Optional[str] = None
    pixel_format: Optional[str] = None
    codec: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)


class AudioStreamRead(BaseModel):
    model_config = ConfigDict(frozen=True)

    layout: Optional[AudioLayout] = None
    channel_count: Optional[int] = Field(None, ge=1)
    sample_rate_hz: Optional[float] = Field(None, ge=0)
    bitrate_kbps: Optional[float] = Field(None, ge=0)
    codec: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)


class MediaInfoRead(BaseModel):
    """JSON view of MediaInfo. Offsets are seconds; bitrate -1 means "N/A"."""
    model_config = ConfigDict(frozen=True)

    path: Optional[str] = None
    kind: MediaKind = MediaKind.unknown
    duration_sec: Optional[float] = None
    duration_timecode: Optional[str] = None
    bitrate: Optional[int] = Field(None, ge=-1)
    start_sec: Optional[float] = None
    video: Optional[VideoStreamRead] = None
    audio: Optional[AudioStreamRead] = None
