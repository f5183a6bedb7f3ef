# mediaprobe/common/probe/matchers.py
"""
Small pattern matchers over ffmpeg's human-readable probe output.

Each matcher looks for one kind of token and returns both the parsed value
and the exact text it claimed, so the stream rules can classify whatever is
left over by elimination (see `leftover_tokens`). Matchers that convert
numbers raise ParseFailureError; they never decide what a failure means for
the record, the rules do.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from mediaprobe.common.strings.splitters import split_top_level
from mediaprobe.domain.enums.audio_layout import AudioLayout
from mediaprobe.domain.errors import MalformedStreamError, ParseFailureError

# ---- line level ---------------------------------------------------------------
VIDEO_STREAM_RE = re.compile(r"Stream(.*): Video: (.*)")
AUDIO_STREAM_RE = re.compile(r"Stream(.*): Audio: (.*)")
ANY_VIDEO_RE = re.compile(r"Stream.+Video")
ANY_AUDIO_RE = re.compile(r"Stream.+Audio")

DURATION_RE = re.compile(r"Duration: ([^,\n]*)")
BITRATE_RE = re.compile(r"bitrate: ([^,\n]*)")
START_RE = re.compile(r"start: ([^,\n]*)")

# ---- stream descriptor tokens -------------------------------------------------
DIMENSIONS_RE = re.compile(r"([1-9][0-9]*)x([1-9][0-9]*)")
TIME_BASE_RE = re.compile(r"([0-9.k]+) (fps|tbr|tbc|tbn)")
ASPECT_RATIO_RE = re.compile(r"\[(?:PAR|SAR) ([0-9:.]+) DAR ([0-9:.]+)\]")
AUDIO_LAYOUT_RE = re.compile(r"(stereo|mono|5\.1)", re.IGNORECASE)
SAMPLE_RATE_RE = re.compile(r"(?<![0-9])([0-9]{3,6}) Hz")
AUDIO_BITRATE_RE = re.compile(r"(?<![0-9])([0-9]{1,3}) kb/s")
LEADING_INT_RE = re.compile(r"^\s*([0-9]+)")

# ---- metadata blocks ----------------------------------------------------------
METADATA_LINE_RE = re.compile(r"^[ \t]*([a-z_]+)[ \t]+: (.*?)[ \t\r]*$", re.MULTILINE)
_BLOCK_FLAGS = re.MULTILINE | re.DOTALL
VIDEO_METADATA_BLOCK_RE = re.compile(r"Metadata:(.*?)^[ \t]*Stream", _BLOCK_FLAGS)
STREAM_METADATA_BLOCK_RE = re.compile(r"Metadata:(.*?)^[ \t]*(?:Stream|At least)", _BLOCK_FLAGS)
HEADER_METADATA_BLOCK_RE = re.compile(r"Metadata:(.*?)^[ \t]*Duration", _BLOCK_FLAGS)

TIME_BASE_KINDS = ("fps", "tbr", "tbc", "tbn")


@dataclass(frozen=True)
class Token:
    """A value pulled out of a descriptor plus the exact text it came from."""
    value: object
    text: str


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------
def parse_rate(value: str) -> float:
    """ffmpeg rate literal -> float. "29.97" -> 29.97, "90k" -> 90000.0."""
    v = (value or "").strip()
    scale = 1.0
    if v.endswith("k"):
        v, scale = v[:-1], 1000.0
    try:
        return float(v) * scale
    except ValueError as e:
        raise ParseFailureError(f"bad rate literal {value!r}") from e


def parse_leading_int(value: str) -> int:
    """Integer made of the leading digits of `value` ("128 kb/s" -> 128)."""
    m = LEADING_INT_RE.match(value or "")
    if not m:
        raise ParseFailureError(f"no leading integer in {value!r}")
    return int(m.group(1))


# ---------------------------------------------------------------------------
# Video descriptor
# ---------------------------------------------------------------------------
def match_dimensions(rest: str) -> Optional[Token]:
    """First WIDTHxHEIGHT token; value is (width, height)."""
    m = DIMENSIONS_RE.search(rest)
    if not m:
        return None
    return Token(value=(int(m.group(1)), int(m.group(2))), text=m.group(0))


def match_time_bases(line: str) -> Tuple[Dict[str, float], Optional[str]]:
    """
    Every "<number> <fps|tbr|tbc|tbn>" in the line.

    Returns the rate mapping and the claimed text: all matched phrases joined
    with ", " in line order (None when nothing matched). A phrase whose number
    does not parse is still claimed but left out of the mapping.
    """
    rates: Dict[str, float] = {}
    phrases: List[str] = []
    for m in TIME_BASE_RE.finditer(line):
        phrases.append(m.group(0))
        try:
            rates[m.group(2)] = parse_rate(m.group(1))
        except ParseFailureError:
            continue
    return rates, (", ".join(phrases) if phrases else None)


def match_aspect_ratios(line: str) -> Optional[Tuple[str, str]]:
    """(pixel/sample aspect ratio, display aspect ratio) from "[SAR a DAR b]"."""
    m = ASPECT_RATIO_RE.search(line)
    if not m:
        return None
    return m.group(1), m.group(2)


def frame_rate_from(time_bases: Dict[str, float]) -> Optional[float]:
    if "fps" in time_bases:
        return time_bases["fps"]
    if "tbr" in time_bases:
        return time_bases["tbr"]
    return None


# ---------------------------------------------------------------------------
# Audio descriptor
# ---------------------------------------------------------------------------
def match_audio_layout(line: str) -> Optional[Token]:
    m = AUDIO_LAYOUT_RE.search(line)
    if not m:
        return None
    layout = AudioLayout.from_token(m.group(1))
    if layout is None:
        return None
    return Token(value=layout, text=m.group(0))


def match_sample_rate(line: str) -> Optional[Token]:
    m = SAMPLE_RATE_RE.search(line)
    if not m:
        return None
    return Token(value=float(m.group(1)), text=m.group(0))


def match_audio_bitrate(line: str) -> Optional[Token]:
    m = AUDIO_BITRATE_RE.search(line)
    if not m:
        return None
    return Token(value=float(m.group(1)), text=m.group(0))


# ---------------------------------------------------------------------------
# Leftovers
# ---------------------------------------------------------------------------
def leftover_tokens(rest: str, claimed: Iterable[Optional[str]]) -> List[str]:
    """
    Classify-by-elimination step shared by the stream rules.

    `rest` (the descriptor after "Video: " / "Audio: ") is split on top-level
    commas and trimmed; parts exactly equal to a claimed token are dropped.
    What remains keeps its original order: position 0 is the codec, position
    1 (video only) the pixel format.
    """
    taken = {c for c in claimed if c}
    return [p for p in split_top_level(rest) if p not in taken]


def pick_token(formats: Sequence[str], index: int, line: str = "") -> str:
    if index >= len(formats) or not formats[index]:
        raise MalformedStreamError(
            f"expected at least {index + 1} unclaimed token(s) in stream line: {line!r}"
        )
    return formats[index]


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------
def parse_metadata_block(block: str) -> Dict[str, str]:
    """
    "tag_name   : value" lines -> {tag_name: value}.
    Tag names are lowercase letters and underscores only. A repeated tag
    keeps its first position and its last value.
    """
    out: Dict[str, str] = {}
    for m in METADATA_LINE_RE.finditer(block or ""):
        out[m.group(1)] = m.group(2)
    return out


def metadata_following(raw: str, offset: int, block_re: re.Pattern[str]) -> Optional[Dict[str, str]]:
    """
    Metadata block that directly follows position `offset` of `raw`
    (only whitespace in between), bounded by `block_re`'s terminator.
    """
    tail = raw[offset:].lstrip()
    if not tail.startswith("Metadata:"):
        return None
    m = block_re.match(tail)
    if not m:
        return None
    return parse_metadata_block(m.group(1))


def metadata_anywhere(raw: str, block_re: re.Pattern[str]) -> Optional[Dict[str, str]]:
    m = block_re.search(raw)
    if not m:
        return None
    return parse_metadata_block(m.group(1))
