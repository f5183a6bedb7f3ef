# mediaprobe/domain/entities/time_offset.py
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

_TIMECODE_RE = re.compile(r"^(\d+):([0-5]?\d):([0-5]?\d(?:\.\d+)?)$")


@dataclass(frozen=True, order=True)
class TimeOffset:
    """
    A point or span of media time, stored as (float) seconds.

    Built either from an ffmpeg timecode ("01:02:03.45") or from a plain
    seconds count ("0.021333"). Decimal arithmetic is used while parsing so
    that e.g. "00:01:23.450" is exactly 83.45.
    """
    seconds: float

    @classmethod
    def from_timecode_string(cls, value: str) -> "TimeOffset":
        m = _TIMECODE_RE.match((value or "").strip())
        if not m:
            raise ValueError(f"not a hh:mm:ss.ms timecode: {value!r}")
        hh, mm, ss = m.groups()
        total = Decimal(hh) * 3600 + Decimal(mm) * 60 + Decimal(ss)
        return cls(float(total))

    @classmethod
    def from_seconds(cls, value: float | int | str) -> "TimeOffset":
        try:
            d = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"not a seconds count: {value!r}") from e
        if not d.is_finite():
            raise ValueError(f"not a finite seconds count: {value!r}")
        return cls(float(d))

    def to_timecode(self) -> str:
        """Format back as hh:mm:ss.mmm (negative offsets keep a leading '-')."""
        sign = "-" if self.seconds < 0 else ""
        ms_total = int(round(abs(self.seconds) * 1000))
        hh, rem = divmod(ms_total, 3_600_000)
        mm, rem = divmod(rem, 60_000)
        ss, ms = divmod(rem, 1000)
        return f"{sign}{hh:02d}:{mm:02d}:{ss:02d}.{ms:03d}"

    def __str__(self) -> str:
        return self.to_timecode()
