# mediaprobe/domain/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(eq=False)
class MediaProbeError(RuntimeError):
    """
    Root of every error this package raises.

    File-level subclasses (not found, not readable, no data, execution)
    propagate to callers. Field-level subclasses (malformed stream, parse
    failure) never leave the extraction rules; they end up as `None` fields.
    """
    message: str
    path: Optional[str] = None

    def __str__(self) -> str:
        return self.message


class MediaNotFoundError(MediaProbeError):
    """No regular file exists at the given path."""


class MediaNotReadableError(MediaProbeError):
    """The file exists but cannot be opened for reading."""


class NoProbeDataError(MediaProbeError):
    """The prober ran but produced no output for the file."""


@dataclass(eq=False)
class ProbeExecutionError(MediaProbeError):
    """The prober binary could not be run, or did not finish in time."""
    stderr: Optional[str] = None
    rc: Optional[int] = None


class MalformedStreamError(MediaProbeError):
    """A stream line matched but its structure is not what the rules expect."""


class ParseFailureError(MediaProbeError):
    """A token matched but could not be converted to a number or offset."""
