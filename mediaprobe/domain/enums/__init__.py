from mediaprobe.domain.enums.audio_layout import AudioLayout
from mediaprobe.domain.enums.file_format import ImageFormats
from mediaprobe.domain.enums.media_kind import MediaKind
__all__ = [
    "AudioLayout",
    "ImageFormats",
    "MediaKind",
]
