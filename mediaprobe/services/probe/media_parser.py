# mediaprobe/services/probe/media_parser.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Tuple, TypeVar

from mediaprobe.common.cache.lru import LRUCache
from mediaprobe.common.logging import get_logger
from mediaprobe.common.probe import rules
from mediaprobe.common.settings import get_settings
from mediaprobe.domain.entities.media_info import AudioStream, MediaInfo, VideoStream
from mediaprobe.domain.entities.time_offset import TimeOffset
from mediaprobe.domain.enums.media_kind import MediaKind
from mediaprobe.domain.errors import MediaProbeError
from mediaprobe.domain.ports.probe import ImageProbePort, ProberPort
from mediaprobe.services.probe.raw_text import RawProbe, RawProbeText

logger = get_logger()

T = TypeVar("T")


class MediaParser:
    """
    Turns ffmpeg's diagnostic text for a file into MediaInfo.

    Every public operation takes (file_path, allow_cache=True). File-level
    problems raise (MediaNotFoundError, MediaNotReadableError,
    NoProbeDataError, ProbeExecutionError); fields that are simply not in
    the output come back as None.

    Two caches:
      - raw text, by content fingerprint (owned by RawProbeText);
      - field results, by (field, canonical path). An entry only counts as a
        hit while the file still has the fingerprint it was computed from,
        so edits to a file never serve stale fields.
    allow_cache=False skips both lookups; fresh results are still stored.
    """

    def __init__(
        self,
        raw: Optional[RawProbeText] = None,
        image_probe: Optional[ImageProbePort] = None,
        *,
        prober: Optional[ProberPort | Callable[[], ProberPort]] = None,
        max_entries: Optional[int] = None,
    ) -> None:
        cfg = get_settings()
        self.raw = raw or RawProbeText(prober=prober)
        if image_probe is None:
            from mediaprobe.services.probe.image_probe import PillowImageProbe  # default adapter
            image_probe = PillowImageProbe()
        self.image_probe = image_probe
        limit = cfg.cache.field_max_entries if max_entries is None else max_entries
        self._fields: LRUCache[Tuple[str, Path], Tuple[str, object]] = LRUCache(limit, name="fields")

    # ---- public API -------------------------------------------------------------
    def get_information(self, file_path: Path | str, allow_cache: bool = True) -> MediaInfo:
        raw = self._fetch(file_path, allow_cache)
        return self._field("information", raw, allow_cache, lambda: self._information(raw, allow_cache))

    def get_type(self, file_path: Path | str, allow_cache: bool = True) -> MediaKind:
        return self._type(self._fetch(file_path, allow_cache), allow_cache)

    def get_duration(self, file_path: Path | str, allow_cache: bool = True) -> Optional[TimeOffset]:
        return self._duration(self._fetch(file_path, allow_cache), allow_cache)

    def get_bitrate(self, file_path: Path | str, allow_cache: bool = True) -> Optional[int]:
        """kb/s; -1 when ffmpeg reports "N/A"; None when it reports nothing."""
        return self._bitrate(self._fetch(file_path, allow_cache), allow_cache)

    def get_start(self, file_path: Path | str, allow_cache: bool = True) -> Optional[TimeOffset]:
        return self._start(self._fetch(file_path, allow_cache), allow_cache)

    def get_video_component(self, file_path: Path | str, allow_cache: bool = True) -> Optional[VideoStream]:
        return self._video(self._fetch(file_path, allow_cache), allow_cache)

    def get_audio_component(self, file_path: Path | str, allow_cache: bool = True) -> Optional[AudioStream]:
        return self._audio(self._fetch(file_path, allow_cache), allow_cache)

    def has_video(self, file_path: Path | str, allow_cache: bool = True) -> bool:
        raw = self._fetch(file_path, allow_cache)
        return self._field("has_video", raw, allow_cache, lambda: rules.has_video(raw.text))

    def has_audio(self, file_path: Path | str, allow_cache: bool = True) -> bool:
        raw = self._fetch(file_path, allow_cache)
        return self._field("has_audio", raw, allow_cache, lambda: rules.has_audio(raw.text))

    def get_raw_information(self, file_path: Path | str, allow_cache: bool = True) -> str:
        """ffmpeg's output for the file, lines joined with newlines."""
        return self._fetch(file_path, allow_cache).text

    def get_information_many(
        self,
        paths: Iterable[Path | str],
        *,
        max_workers: Optional[int] = None,
        allow_cache: bool = True,
    ) -> Dict[str, MediaInfo | MediaProbeError]:
        """
        Probe several files on a thread pool. Each path maps to its MediaInfo
        or to the MediaProbeError that stopped it; other exceptions propagate.
        """
        workers = max_workers or get_settings().probe_workers
        out: Dict[str, MediaInfo | MediaProbeError] = {}
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="mediaprobe") as pool:
            futures = {pool.submit(self.get_information, p, allow_cache): str(p) for p in paths}
            for fut in as_completed(futures):
                key = futures[fut]
                try:
                    out[key] = fut.result()
                except MediaProbeError as e:
                    logger.warning("probe failed for %s: %s", key, e)
                    out[key] = e
        return out

    # ---- cache control ----------------------------------------------------------
    def invalidate(self, file_path: Path | str) -> None:
        path = Path(file_path).expanduser().resolve()
        dropped = self._fields.invalidate_where(lambda k: k[1] == path)
        self.raw.invalidate(path)
        logger.debug("invalidated %s (%d field entries)", path, dropped)

    def clear_cache(self) -> None:
        self._fields.clear()
        self.raw.clear()

    # ---- per-field, over one raw probe ------------------------------------------
    def _information(self, raw: RawProbe, allow_cache: bool) -> MediaInfo:
        return MediaInfo(
            kind=self._type(raw, allow_cache),
            duration=self._duration(raw, allow_cache),
            bitrate=self._bitrate(raw, allow_cache),
            start=self._start(raw, allow_cache),
            video=self._video(raw, allow_cache),
            audio=self._audio(raw, allow_cache),
        )

    def _type(self, raw: RawProbe, allow_cache: bool) -> MediaKind:
        return self._field(
            "type", raw, allow_cache,
            lambda: rules.extract_type(raw.text, lambda: self.image_probe.looks_like_image(raw.path)),
        )

    def _duration(self, raw: RawProbe, allow_cache: bool) -> Optional[TimeOffset]:
        return self._field("duration", raw, allow_cache, lambda: rules.extract_duration(raw.text))

    def _bitrate(self, raw: RawProbe, allow_cache: bool) -> Optional[int]:
        return self._field("bitrate", raw, allow_cache, lambda: rules.extract_bitrate(raw.text))

    def _start(self, raw: RawProbe, allow_cache: bool) -> Optional[TimeOffset]:
        return self._field("start", raw, allow_cache, lambda: rules.extract_start(raw.text))

    def _video(self, raw: RawProbe, allow_cache: bool) -> Optional[VideoStream]:
        # frame_count needs the file duration of this same probe
        return self._field(
            "video", raw, allow_cache,
            lambda: rules.extract_video(raw.text, duration=self._duration(raw, allow_cache)),
        )

    def _audio(self, raw: RawProbe, allow_cache: bool) -> Optional[AudioStream]:
        return self._field("audio", raw, allow_cache, lambda: rules.extract_audio(raw.text))

    def _fetch(self, file_path: Path | str, allow_cache: bool) -> RawProbe:
        return self.raw.fetch(file_path, allow_cache)

    def _field(self, name: str, raw: RawProbe, allow_cache: bool, compute: Callable[[], T]) -> T:
        key = (name, raw.path)
        if allow_cache:
            entry = self._fields.get(key)
            if entry is not None and entry[0] == raw.fingerprint:
                return entry[1]  # type: ignore[return-value]
        value = compute()
        self._fields.put(key, (raw.fingerprint, value))
        return value
