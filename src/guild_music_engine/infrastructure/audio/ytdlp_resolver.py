"""TrackResolver implementation using yt-dlp for URLs, playlists and search."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Final

from yt_dlp import YoutubeDL

from guild_music_engine.application.interfaces.track_resolver import TrackResolver
from guild_music_engine.config.settings import AudioSettings
from guild_music_engine.domain.music.entities import Track, TrackCandidate
from guild_music_engine.domain.music.value_objects import TrackId
from guild_music_engine.domain.shared.exceptions import ResolutionFailedError
from guild_music_engine.domain.shared.messages import ErrorMessages, LogTemplates

from .models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    LOG_URL_TRUNCATE,
    CacheEntry,
    YtDlpEntry,
    YtDlpOpts,
)

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH: Final[int] = 500
MAX_DURATION_SECONDS: Final[int] = 86_400

URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"https?://"),
    re.compile(r"www\."),
]

PLAYLIST_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"[?&]list="),
    re.compile(r"/playlist\?"),
    re.compile(r"/sets/"),
]

SPOTIFY_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?:open\.)?spotify\.com/")
SPOTIFY_TRACK_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"spotify\.com/(?:intl-[a-z]+/)?track/([A-Za-z0-9]+)"
)


class YtDlpResolver(TrackResolver):
    """Blocking yt-dlp calls run in worker threads via ``asyncio.to_thread``."""

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format)
        self._cache: dict[str, CacheEntry] = {}

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    # ── Query classification ─────────────────────────────────────────

    def is_url(self, query: str) -> bool:
        return any(pattern.search(query) for pattern in URL_PATTERNS)

    def is_playlist(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in PLAYLIST_PATTERNS)

    def is_spotify(self, url: str) -> bool:
        return SPOTIFY_PATTERN.search(url) is not None

    @staticmethod
    def spotify_search_query(url: str) -> str | None:
        """Spotify links are not streamable; a track link becomes a search term."""
        match = SPOTIFY_TRACK_PATTERN.search(url)
        return f"spotify track {match.group(1)}" if match else None

    # ── Conversion ───────────────────────────────────────────────────

    @staticmethod
    def _entry_to_track(entry: YtDlpEntry) -> Track | None:
        page_url = entry.page_url
        if not page_url:
            logger.warning(LogTemplates.YTDLP_NO_URL_IN_INFO_DICT)
            return None

        duration = entry.duration
        if duration is not None and duration > MAX_DURATION_SECONDS:
            duration = None

        stream_url = entry.media_url
        if stream_url is not None and not stream_url.startswith(("http://", "https://")):
            stream_url = None

        try:
            return Track(
                id=TrackId.from_url(page_url),
                title=entry.title[:MAX_TITLE_LENGTH],
                url=page_url,
                author=entry.author,
                duration_seconds=duration,
                thumbnail_url=entry.thumbnail,
                stream_url=stream_url,
            )
        except ValueError:
            logger.exception(LogTemplates.YTDLP_FAILED_INFO_TO_TRACK)
            return None

    @staticmethod
    def _entry_to_candidate(entry: YtDlpEntry) -> TrackCandidate | None:
        page_url = entry.page_url
        if not page_url:
            return None
        duration = entry.duration
        if duration is not None and duration > MAX_DURATION_SECONDS:
            duration = None
        return TrackCandidate(
            title=entry.title[:MAX_TITLE_LENGTH],
            url=page_url,
            author=entry.author,
            duration_seconds=duration,
        )

    @staticmethod
    def _entries(data: Any) -> list[YtDlpEntry]:
        if not isinstance(data, dict):
            return []
        entries = data.get("entries") or []
        return [YtDlpEntry.model_validate(dict(e)) for e in entries if isinstance(e, dict)]

    # ── Blocking extraction (worker thread) ──────────────────────────

    def _extract_info_sync(self, url: str) -> YtDlpEntry | None:
        now = time.time()
        cached = self._cache.get(url)
        if cached is not None:
            if now - cached.cached_at < CACHE_TTL:
                logger.debug(LogTemplates.CACHE_HIT_URL, url[:LOG_URL_TRUNCATE])
                return cached.info
            self._cache.pop(url, None)

        try:
            with YoutubeDL(params=self._get_opts().to_params()) as ydl:
                data = ydl.extract_info(url, download=False)
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url)
            return None

        result = YtDlpEntry.model_validate(dict(data)) if isinstance(data, dict) else None
        self._cache[url] = CacheEntry(info=result, cached_at=now)
        self._prune_cache(now)
        return result

    def _prune_cache(self, now: float) -> None:
        if len(self._cache) <= CACHE_MAX_SIZE:
            return
        expired = [k for k, entry in self._cache.items() if now - entry.cached_at >= CACHE_TTL]
        for k in expired:
            self._cache.pop(k, None)
        if expired:
            logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

    def _search_sync(self, query: str, limit: int, *, flat: bool) -> list[YtDlpEntry]:
        opts = self._get_opts(extract_flat="in_playlist") if flat else self._get_opts()
        try:
            with YoutubeDL(params=opts.to_params()) as ydl:
                data = ydl.extract_info(f"ytsearch{limit}:{query}", download=False)
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_SEARCH, query)
            return []
        return self._entries(data)

    def _extract_playlist_sync(self, url: str, limit: int) -> list[YtDlpEntry]:
        opts = self._get_opts(noplaylist=False, extract_flat="in_playlist", playlistend=limit)
        try:
            with YoutubeDL(params=opts.to_params()) as ydl:
                data = ydl.extract_info(url, download=False)
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url)
            return []
        return self._entries(data)[:limit]

    # ── TrackResolver ────────────────────────────────────────────────

    async def resolve(self, query: str, limit: int = 50) -> list[Track]:
        query = query.strip()
        if not query:
            raise ResolutionFailedError(query, ErrorMessages.RESOLVER_RETURNED_NOTHING)

        if self.is_spotify(query):
            search = self.spotify_search_query(query)
            if search is None:
                raise ResolutionFailedError(query)
            logger.info(LogTemplates.YTDLP_SPOTIFY_FALLBACK, query, search)
            entries = await asyncio.to_thread(self._search_sync, search, 1, flat=False)
        elif self.is_url(query) and self.is_playlist(query):
            entries = await asyncio.to_thread(self._extract_playlist_sync, query, limit)
        elif self.is_url(query):
            info = await asyncio.to_thread(self._extract_info_sync, query)
            entries = [info] if info is not None else []
        else:
            entries = await asyncio.to_thread(self._search_sync, query, 1, flat=False)

        tracks = [t for t in (self._entry_to_track(e) for e in entries) if t is not None]
        if not tracks:
            raise ResolutionFailedError(query, ErrorMessages.RESOLVER_RETURNED_NOTHING)
        return tracks

    async def search_candidates(self, partial: str, limit: int = 10) -> list[TrackCandidate]:
        entries = await asyncio.to_thread(self._search_sync, partial, limit, flat=True)
        candidates: list[TrackCandidate] = []
        for entry in entries:
            try:
                candidate = self._entry_to_candidate(entry)
            except ValueError as e:
                logger.debug(LogTemplates.SEARCH_FAILED.format(query=partial, error=e))
                continue
            if candidate is not None:
                candidates.append(candidate)
        return candidates[:limit]

    async def refresh_stream(self, track: Track) -> Track:
        """Fill in ``stream_url`` for a track that came from a flat playlist or storage.

        Raises:
            ResolutionFailedError: If no media URL could be extracted.
        """
        info = await asyncio.to_thread(self._extract_info_sync, track.url)
        stream_url = info.media_url if info is not None else None
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, track.title)
            raise ResolutionFailedError(track.url, ErrorMessages.NO_STREAM_URL.format(title=track.title))
        return track.model_copy(update={"stream_url": stream_url})
