"""Pydantic models for parsing yt-dlp output and building its options.

yt-dlp hands back loosely typed dicts. These models keep the handful of
fields the engine needs and coerce the garbage yt-dlp sometimes emits.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from guild_music_engine.domain.shared.types import NonEmptyStr, NonNegativeFloat, NonNegativeInt, PositiveInt

CACHE_TTL: Final[int] = 3600
CACHE_MAX_SIZE: Final[int] = 500
DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
LOG_URL_TRUNCATE: Final[int] = 60

UNKNOWN_TITLE: Final[str] = "Unknown Title"


class AudioFormatInfo(BaseModel):
    """A single format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None


class YtDlpEntry(BaseModel):
    """One extracted video, or one flat entry of a playlist or search page.

    Flat entries carry ``url`` as the watch page; full extractions carry it as
    the media URL and put the watch page in ``webpage_url``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: NonEmptyStr | None = None
    webpage_url: NonEmptyStr | None = None
    url: NonEmptyStr | None = None
    title: NonEmptyStr = UNKNOWN_TITLE
    duration: NonNegativeInt | None = None
    thumbnail: NonEmptyStr | None = None
    artist: NonEmptyStr | None = None
    uploader: NonEmptyStr | None = None
    channel: NonEmptyStr | None = None
    ie_key: NonEmptyStr | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator(
        "id", "webpage_url", "url", "thumbnail", "artist", "uploader", "channel", "ie_key",
        mode="before",
    )
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            return UNKNOWN_TITLE
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        """yt-dlp reports floats for some extractors and junk for live streams."""
        if v is None:
            return None
        try:
            val = int(v)
        except (TypeError, ValueError):
            return None
        return val if val >= 0 else None

    @field_validator("thumbnail", mode="after")
    @classmethod
    def _http_only(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith(("http://", "https://")):
            return None
        return v

    @property
    def author(self) -> str | None:
        return self.artist or self.uploader or self.channel

    @property
    def page_url(self) -> str | None:
        """The URL a user would open, used as the track's identity."""
        if self.webpage_url:
            return self.webpage_url
        if self.url and self.url.startswith(("http://", "https://")):
            return self.url
        if self.id and self.ie_key == "Youtube":
            return f"https://www.youtube.com/watch?v={self.id}"
        return None

    @property
    def media_url(self) -> str | None:
        """Direct stream URL, present only on full extractions."""
        if self.webpage_url and self.url and self.url != self.webpage_url:
            return self.url
        audio = [f for f in self.formats if f.acodec != "none" and f.url]
        return audio[-1].url if audio else None


class CacheEntry(BaseModel):
    """Cached full extraction with its timestamp."""

    model_config = ConfigDict(frozen=True)

    info: YtDlpEntry | None = None
    cached_at: NonNegativeFloat


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    default_search: NonEmptyStr = "ytsearch"
    forceipv4: bool = True
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    format: NonEmptyStr | None = None
    skip_download: bool = True
    extract_flat: NonEmptyStr | bool = False
    playlistend: PositiveInt | None = None

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
