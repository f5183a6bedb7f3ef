# mediaprobe/services/probe/raw_text.py
from __future__ import annotations

import threading
from concurrent.futures import Future, TimeoutError as FutureTimeout
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

from mediaprobe.common.cache.lru import LRUCache
from mediaprobe.common.logging import get_logger
from mediaprobe.common.path.safe import resolve_media_path
from mediaprobe.common.settings import get_settings
from mediaprobe.domain.errors import (
    MediaNotFoundError,
    MediaNotReadableError,
    NoProbeDataError,
    ProbeExecutionError,
)
from mediaprobe.domain.ports.hashing import HashingPort
from mediaprobe.domain.ports.probe import ProberPort
from mediaprobe.services.hashing.simple_hashing import SimpleHashing

logger = get_logger()


@dataclass(frozen=True)
class RawProbe:
    """One probe's output for one file state."""
    path: Path
    fingerprint: str
    text: str


class RawProbeText:
    """
    Fetches the prober's text for a file, cached by content fingerprint.

    - Fingerprint is the hashing port's "<content hash>_<mtime>", so a changed
      file always misses the cache.
    - Concurrent fetches of the same fingerprint share one prober run: the
      first caller probes, the others wait on its Future.
    - The text cache and the path -> fingerprint index are LRUs bounded by
      settings.cache.raw_text_max_entries (0 = unbounded).
    """

    def __init__(
        self,
        prober: Optional[ProberPort | Callable[[], ProberPort]] = None,
        hashing: Optional[HashingPort] = None,
        max_entries: Optional[int] = None,
    ) -> None:
        cfg = get_settings()
        # prober may be an instance or a factory (e.g. FFmpegProber); resolved lazily
        self._prober_src = prober
        self._prober: Optional[ProberPort] = None
        self._hashing: HashingPort = hashing or SimpleHashing(chunk_size=cfg.cache.hash_chunk_size)
        limit = cfg.cache.raw_text_max_entries if max_entries is None else max_entries
        self._cache: LRUCache[str, str] = LRUCache(limit, name="raw_text")
        self._fingerprints: LRUCache[Path, str] = LRUCache(limit, name="fingerprints")
        self._inflight: Dict[str, Future[str]] = {}
        self._lock = threading.Lock()

    @property
    def prober(self) -> ProberPort:
        with self._lock:
            if self._prober is None:
                src = self._prober_src
                if src is None:
                    from mediaprobe.services.probe.ffmpeg_adapter import FFmpegProber  # default adapter
                    src = FFmpegProber
                is_instance = hasattr(src, "probe") and not isinstance(src, type)
                self._prober = src if is_instance else src()  # type: ignore[operator,assignment]
            return self._prober  # type: ignore[return-value]

    # ---- API ------------------------------------------------------------------
    def fetch(self, file_path: Path | str, allow_cache: bool = True, timeout: Optional[float] = None) -> RawProbe:
        """
        Raw probe text for `file_path`.

        Raises MediaNotFoundError / MediaNotReadableError for file problems,
        NoProbeDataError when the prober printed nothing and
        ProbeExecutionError when it could not run (or `timeout` seconds
        passed while waiting on another caller's run of the same file).
        """
        path = resolve_media_path(file_path)
        fp = self._fingerprint(path)
        self._fingerprints.put(path, fp)

        if allow_cache:
            text = self._cache.get(fp)
            if text is not None:
                logger.debug("raw probe cache hit: %s", path)
                return RawProbe(path=path, fingerprint=fp, text=text)

        with self._lock:
            fut = self._inflight.get(fp)
            if fut is None and allow_cache:
                # a run may have finished since the lookup above
                text = self._cache.get(fp)
                if text is not None:
                    return RawProbe(path=path, fingerprint=fp, text=text)
            leader = fut is None
            if leader:
                fut = Future()
                self._inflight[fp] = fut

        if not leader:
            logger.debug("waiting on in-flight probe: %s", path)
            try:
                text = fut.result(timeout=timeout)  # type: ignore[union-attr]
            except FutureTimeout as e:
                raise ProbeExecutionError(
                    f"timed out after {timeout}s waiting for probe of {path}", path=str(path)
                ) from e
            return RawProbe(path=path, fingerprint=fp, text=text)

        try:
            text = self._run_prober(path)
            self._cache.put(fp, text)
            fut.set_result(text)  # type: ignore[union-attr]
        except BaseException as e:
            fut.set_exception(e)  # type: ignore[union-attr]
            raise
        finally:
            with self._lock:
                self._inflight.pop(fp, None)
        return RawProbe(path=path, fingerprint=fp, text=text)

    def invalidate(self, file_path: Path | str) -> bool:
        """Forget the cached text of the file's last seen fingerprint."""
        path = Path(file_path).expanduser().resolve()
        fp = self._fingerprints.pop(path)
        return self._cache.invalidate(fp) if fp else False

    def clear(self) -> None:
        self._fingerprints.clear()
        self._cache.clear()

    @property
    def cache(self) -> LRUCache[str, str]:
        return self._cache

    # ---- internals ------------------------------------------------------------
    def _fingerprint(self, path: Path) -> str:
        try:
            return self._hashing.fingerprint(path)
        except PermissionError as e:
            raise MediaNotReadableError(f"File is not readable: {path}", path=str(path)) from e
        except FileNotFoundError as e:
            raise MediaNotFoundError(f"File not found: {path}", path=str(path)) from e

    def _run_prober(self, path: Path) -> str:
        logger.debug("probing %s", path)
        try:
            lines = list(self.prober.probe(path) or [])
        except ProbeExecutionError as e:
            logger.warning("probe failed for %s: %s", path, e)
            raise
        text = "\n".join(lines)
        if not text.strip():
            raise NoProbeDataError(f"Prober returned no data for {path}", path=str(path))
        return text
