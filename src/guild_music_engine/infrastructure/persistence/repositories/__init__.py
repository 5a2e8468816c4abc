"""SQLite repository implementations."""

from guild_music_engine.infrastructure.persistence.repositories.playlist_repository import (
    SQLitePlaylistRepository,
)

__all__ = [
    "SQLitePlaylistRepository",
]
