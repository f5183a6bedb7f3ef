# mediaprobe/services/probe/ffmpeg_adapter.py
from __future__ import annotations

import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from mediaprobe.common.logging import get_logger
from mediaprobe.common.settings import get_settings
from mediaprobe.domain.errors import ProbeExecutionError
from mediaprobe.domain.ports.probe import ProberPort

logger = get_logger()


def build_ffmpeg_cmd(ffmpeg_bin: str, input_path: str | Path, *, hide_banner: bool = True) -> List[str]:
    """
    `ffmpeg -i <file>` with no output: ffmpeg describes the input on stderr
    and exits non-zero complaining that no output file was given.
    """
    cmd = [ffmpeg_bin]
    if hide_banner:
        cmd.append("-hide_banner")
    cmd += ["-i", str(input_path)]
    return cmd


class FFmpegProber(ProberPort):
    """
    Infrastructure adapter implementing ProberPort with the `ffmpeg` binary.
    Safe for use from worker threads (I/O-bound).
    """

    def __init__(self, ffmpeg_bin: Optional[str] = None, timeout_sec: Optional[int] = None):
        cfg = get_settings()
        candidate = ffmpeg_bin or cfg.ffmpeg.bin
        if not Path(candidate).is_absolute():
            # try to resolve absolute path for nicer errors
            resolved = shutil.which(candidate)
            if not resolved:
                raise ProbeExecutionError(f"{candidate} not found on PATH; set FFMPEG__BIN or install ffmpeg.")
            candidate = resolved

        self.ffmpeg_bin = candidate
        self.timeout_sec = int(timeout_sec or cfg.ffmpeg.timeout_sec)
        self.hide_banner = cfg.ffmpeg.hide_banner

    # ---- Port API -------------------------------------------------------------
    def probe(self, path: Path) -> List[str]:
        if not path:
            raise ProbeExecutionError("No path provided to probe().")

        cmd = build_ffmpeg_cmd(self.ffmpeg_bin, path, hide_banner=self.hide_banner)
        logger.debug("ffmpeg cmd: %s", " ".join(shlex.quote(p) for p in cmd))

        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout_sec,
                check=False,  # a non-zero rc is the normal outcome without an output file
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeExecutionError(
                f"ffmpeg timed out after {self.timeout_sec}s", path=str(path), stderr=str(e)
            ) from e
        except OSError as e:
            raise ProbeExecutionError("Failed to execute ffmpeg (OS error).", path=str(path), stderr=str(e)) from e

        output = proc.stderr or proc.stdout or ""
        if not output.strip():
            logger.warning("ffmpeg produced no output for %s (rc=%s)", path, proc.returncode)
            return []
        return output.splitlines()
