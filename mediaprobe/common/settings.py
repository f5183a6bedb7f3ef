# mediaprobe/common/settings.py
from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class FFmpegConfig(BaseModel):
    bin: str = "ffmpeg"
    timeout_sec: int = Field(30, ge=1)
    hide_banner: bool = True

    @field_validator("hide_banner", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v, default=True)


class CacheConfig(BaseModel):
    # LRU bounds; 0 means unbounded
    raw_text_max_entries: int = Field(256, ge=0)
    field_max_entries: int = Field(2048, ge=0)
    hash_chunk_size: int = Field(1024 * 1024, ge=4096)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "mediaprobe"
    app_env: str = "development"  # development|test|production
    log_level: str = "INFO"

    # -------- Sub-configs --------
    ffmpeg: FFmpegConfig = FFmpegConfig()
    cache: CacheConfig = CacheConfig()

    # -------- Batch probing --------
    probe_workers: int = Field(4, ge=1, le=64, description="Default pool size for get_information_many")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from mediaprobe.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()
