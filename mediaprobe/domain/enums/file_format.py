# mediaprobe/domain/enums/file_format.py
from __future__ import annotations

from enum import StrEnum


class ImageFormats(StrEnum):
    """Still-image formats that classify a single-frame "video" stream as an image."""
    JPG = "jpg"
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    GIF = "gif"
    BMP = "bmp"
    TIFF = "tiff"
    TIF = "tif"
    AVIF = "avif"
