# mediaprobe/common/logging.py
from __future__ import annotations

import logging

from mediaprobe.common.settings import get_settings


def get_logger(name: str = "mediaprobe", level: int | str | None = None) -> logging.Logger:
    """
    Return the package logger, at `level` or settings.log_level.
    If nothing has configured logging yet, we add a basicConfig once.
    """
    if level is None:
        level = get_settings().log_level.upper()
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.setLevel(level)
    return logger
