# mediaprobe/services/probe/image_probe.py
from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from mediaprobe.common.logging import get_logger
from mediaprobe.domain.enums.file_format import ImageFormats
from mediaprobe.domain.ports.probe import ImageProbePort

logger = get_logger()

_ACCEPTED = {f.value for f in ImageFormats}


class PillowImageProbe(ImageProbePort):
    """
    Decides whether a file ffmpeg reports as a video stream is really a still
    image: Pillow must open it and report one of the ImageFormats.
    Animated GIF/WebP count as images as well.
    """

    def looks_like_image(self, path: Path) -> bool:
        try:
            with Image.open(path) as img:
                fmt = (img.format or "").lower()
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            logger.debug("not an image: %s (%s)", path, e)
            return False
        return fmt in _ACCEPTED
