"""Shared constants for SQL, audio, and engine limits."""

from __future__ import annotations


class DatabaseTables:
    """Table names used by the SQLite schema."""

    PLAYLISTS = "playlists"
    PLAYLIST_TRACKS = "playlist_tracks"


class SQLPragmas:
    """SQLite PRAGMA statements applied to each connection."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"


class DatabaseURLSchemes:
    """Valid database URL schemes for validation."""

    SQLITE = "sqlite://"

    # For in-memory testing
    MEMORY = ":memory:"
    MEMORY_SHARED_URI = "file:guild-music-engine?mode=memory&cache=shared"


class AudioConstants:
    """Audio and FFmpeg configuration constants."""

    FFMPEG_BEFORE_OPTIONS_DEFAULT = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    FFMPEG_OPTIONS_DEFAULT = "-vn"

    # Matches yt-dlp's Android client user-agent to avoid YouTube 403 responses
    ANDROID_USER_AGENT = "com.google.android.youtube/19.44.38 (Linux; U; Android 14) gzip"

    YTDLP_FORMAT_DEFAULT = "bestaudio/best"
    CONNECT_TIMEOUT_SECONDS = 10.0


class LimitConstants:
    """Numeric limits and constraints."""

    MIN_VOLUME = 0
    MAX_VOLUME = 100
    DEFAULT_VOLUME = 100
    VOLUME_STEP = 10

    DEFAULT_HISTORY_DEPTH = 10

    MIN_SKIP_AMOUNT = 1
    MAX_SKIP_AMOUNT = 10

    PLAYLIST_EXTRACT_LIMIT = 50
    AUTOCOMPLETE_MIN_QUERY = 3
    AUTOCOMPLETE_LIMIT = 10
    PLAYLIST_CHOICE_LIMIT = 25
    MAX_PLAYLIST_NAME_LENGTH = 100

    # Discord limits
    MAX_CHOICE_NAME_LENGTH = 100
    MAX_SELECT_OPTIONS = 25
    QUEUE_PAGE_SIZE = 10
