"""Audio infrastructure - yt-dlp track resolution."""

from guild_music_engine.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpEntry,
    YtDlpOpts,
)
from guild_music_engine.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "YtDlpEntry",
    "YtDlpOpts",
    "YtDlpResolver",
]
