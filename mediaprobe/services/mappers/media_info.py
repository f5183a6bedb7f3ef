# mediaprobe/services/mappers/media_info.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from mediaprobe.domain.entities.media_info import MediaInfo
from mediaprobe.services.schemas.media_info import AudioStreamRead, MediaInfoRead, VideoStreamRead


def to_media_info_read(info: MediaInfo, path: Optional[Path | str] = None) -> MediaInfoRead:
    return MediaInfoRead(
        path=str(path) if path is not None else None,
        kind=info.kind,
        duration_sec=info.duration.seconds if info.duration else None,
        duration_timecode=info.duration.to_timecode() if info.duration else None,
        bitrate=info.bitrate,
        start_sec=info.start.seconds if info.start else None,
        video=VideoStreamRead(**info.video.as_dict()) if info.video else None,
        audio=AudioStreamRead(**info.audio.as_dict()) if info.audio else None,
    )
