from mediaprobe.services.schemas.media_info import (
    AudioStreamRead,
    MediaInfoRead,
    VideoStreamRead,
)

__all__ = [
    "AudioStreamRead",
    "MediaInfoRead",
    "VideoStreamRead",
]
