# mediaprobe/common/probe/rules.py
"""
Extraction rules: raw ffmpeg probe text -> typed fields.

Every rule is a pure function of the text (plus, for classification, an
image check supplied by the caller) and returns None for "not present".
Field-level problems (ParseFailureError, MalformedStreamError) are absorbed
here and logged at DEBUG; they never abort the record.
"""
from __future__ import annotations

import math
from typing import Callable, Optional

from mediaprobe.common.logging import get_logger
from mediaprobe.common.probe import matchers as m
from mediaprobe.domain.entities.media_info import BITRATE_UNKNOWN, AudioStream, VideoStream
from mediaprobe.domain.entities.time_offset import TimeOffset
from mediaprobe.domain.enums.media_kind import MediaKind
from mediaprobe.domain.errors import MalformedStreamError, ParseFailureError

logger = get_logger()


def extract_type(text: str, looks_like_image: Callable[[], bool]) -> MediaKind:
    """
    video stream line -> image (if `looks_like_image()` agrees) or video;
    else audio stream line -> audio; else unknown.
    """
    if m.VIDEO_STREAM_RE.search(text):
        return MediaKind.image if looks_like_image() else MediaKind.video
    if m.AUDIO_STREAM_RE.search(text):
        return MediaKind.audio
    return MediaKind.unknown


def extract_duration(text: str) -> Optional[TimeOffset]:
    hit = m.DURATION_RE.search(text)
    if not hit:
        return None
    try:
        return TimeOffset.from_timecode_string(hit.group(1))
    except ValueError:
        # "Duration: N/A" for streams and some image inputs
        logger.debug("unparseable duration %r", hit.group(1))
        return None


def extract_bitrate(text: str) -> Optional[int]:
    """
    Container bitrate in kb/s; BITRATE_UNKNOWN (-1) for "bitrate: N/A";
    None when there is no bitrate announcement at all.
    """
    hit = m.BITRATE_RE.search(text)
    if not hit:
        return None
    value = hit.group(1).strip()
    if value.upper() == "N/A":
        return BITRATE_UNKNOWN
    try:
        return m.parse_leading_int(value)
    except ParseFailureError as e:
        logger.debug("%s", e)
        return None


def extract_start(text: str) -> Optional[TimeOffset]:
    hit = m.START_RE.search(text)
    if not hit:
        return None
    try:
        return TimeOffset.from_seconds(hit.group(1))
    except ValueError:
        logger.debug("unparseable start %r", hit.group(1))
        return None


def has_video(text: str) -> bool:
    return m.ANY_VIDEO_RE.search(text) is not None


def has_audio(text: str) -> bool:
    return m.ANY_AUDIO_RE.search(text) is not None


def _absorbed(fn: Callable[[], str]) -> Optional[str]:
    try:
        return fn()
    except MalformedStreamError as e:
        logger.debug("%s", e)
        return None


def extract_video(text: str, duration: Optional[TimeOffset] = None) -> Optional[VideoStream]:
    """
    First "Stream ...: Video: ..." line -> VideoStream.

    `duration` defaults to the file duration announced in the same text;
    frame_count is derived from it and the frame rate on every call.
    """
    line = m.VIDEO_STREAM_RE.search(text)
    if not line:
        return None
    full, rest = line.group(0), line.group(2)

    width = height = None
    dims = m.match_dimensions(rest)
    if dims:
        width, height = dims.value  # type: ignore[misc]

    time_bases, time_base_text = m.match_time_bases(full)

    par = dar = None
    ratios = m.match_aspect_ratios(full)
    if ratios:
        par, dar = ratios

    frame_rate = m.frame_rate_from(time_bases)
    frame_count = None
    if duration is None:
        duration = extract_duration(text)
    if frame_rate is not None and duration is not None:
        frame_count = int(math.ceil(duration.seconds * frame_rate))

    formats = m.leftover_tokens(rest, [dims.text if dims else None, time_base_text])
    codec = _absorbed(lambda: m.pick_token(formats, 0, full))
    pixel_format = _absorbed(lambda: m.pick_token(formats, 1, full))

    metadata = m.metadata_following(text, line.end(), m.VIDEO_METADATA_BLOCK_RE) or {}

    return VideoStream(
        width=width,
        height=height,
        time_bases=time_bases,
        frame_rate=frame_rate,
        frame_count=frame_count,
        pixel_aspect_ratio=par,
        display_aspect_ratio=dar,
        pixel_format=pixel_format,
        codec=codec,
        metadata=metadata,
    )


def extract_audio(text: str) -> Optional[AudioStream]:
    """
    First "Stream ...: Audio: ..." line -> AudioStream.

    Metadata: a block right after the stream line (ended by the next Stream
    or by ffmpeg's "At least one output file..." notice) is tried first; if
    there is none, the header block ending at "Duration" (id3 style tags of
    pure audio files) is used.
    """
    line = m.AUDIO_STREAM_RE.search(text)
    if not line:
        return None
    full, rest = line.group(0), line.group(2)

    layout = m.match_audio_layout(full)
    sample_rate = m.match_sample_rate(full)
    bitrate = m.match_audio_bitrate(full)

    claimed = [t.text for t in (layout, sample_rate, bitrate) if t is not None]
    formats = m.leftover_tokens(rest, claimed)
    codec = _absorbed(lambda: m.pick_token(formats, 0, full))

    metadata = m.metadata_following(text, line.end(), m.STREAM_METADATA_BLOCK_RE)
    if metadata is None:
        metadata = m.metadata_anywhere(text, m.HEADER_METADATA_BLOCK_RE)

    return AudioStream(
        layout=layout.value if layout else None,  # type: ignore[arg-type]
        channel_count=layout.value.channel_count if layout else None,  # type: ignore[union-attr]
        sample_rate_hz=sample_rate.value if sample_rate else None,  # type: ignore[arg-type]
        bitrate_kbps=bitrate.value if bitrate else None,  # type: ignore[arg-type]
        codec=codec,
        metadata=metadata or {},
    )
