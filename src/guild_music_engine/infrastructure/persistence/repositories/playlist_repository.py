"""SQLite implementation of the playlist repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aiosqlite

from guild_music_engine.domain.music.entities import Track
from guild_music_engine.domain.music.playlist import Playlist, playlist_name_key
from guild_music_engine.domain.music.repository import PlaylistRepository
from guild_music_engine.domain.music.value_objects import TrackId
from guild_music_engine.domain.shared.constants import DatabaseTables
from guild_music_engine.domain.shared.datetime_utils import UtcDateTime

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)

_PLAYLISTS = DatabaseTables.PLAYLISTS
_TRACKS = DatabaseTables.PLAYLIST_TRACKS


class SQLitePlaylistRepository(PlaylistRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def add(self, playlist: Playlist) -> bool:
        try:
            async with self._db.transaction() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO {_PLAYLISTS} (id, owner_id, name, name_key, is_public, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        playlist.id,
                        playlist.owner_id,
                        playlist.name,
                        playlist.name_key,
                        int(playlist.is_public),
                        UtcDateTime(playlist.created_at).iso,
                    ),
                )
                await conn.executemany(
                    f"""
                    INSERT INTO {_TRACKS} (
                        playlist_id, position, track_id, title, url, author,
                        duration_seconds, thumbnail_url, requested_by_id,
                        requested_by_name, added_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [self._track_params(playlist.id, i, t) for i, t in enumerate(playlist.tracks)],
                )
        except aiosqlite.IntegrityError:
            logger.debug("Playlist %r already exists for owner %s", playlist.name, playlist.owner_id)
            return False
        return True

    async def get(self, playlist_id: str) -> Playlist | None:
        row = await self._db.fetch_one(f"SELECT * FROM {_PLAYLISTS} WHERE id = ?", (playlist_id,))
        if row is None:
            return None
        return await self._hydrate(row)

    async def get_by_name(self, owner_id: int, name: str) -> Playlist | None:
        row = await self._db.fetch_one(
            f"SELECT * FROM {_PLAYLISTS} WHERE owner_id = ? AND name_key = ?",
            (owner_id, playlist_name_key(name)),
        )
        if row is None:
            return None
        return await self._hydrate(row)

    async def delete(self, owner_id: int, name: str) -> bool:
        deleted = await self._db.execute(
            f"DELETE FROM {_PLAYLISTS} WHERE owner_id = ? AND name_key = ?",
            (owner_id, playlist_name_key(name)),
        )
        return deleted > 0

    async def list_for_owner(self, owner_id: int) -> list[Playlist]:
        rows = await self._db.fetch_all(
            f"SELECT * FROM {_PLAYLISTS} WHERE owner_id = ? ORDER BY created_at, id",
            (owner_id,),
        )
        return [await self._hydrate(row) for row in rows]

    async def _hydrate(self, row: dict[str, Any]) -> Playlist:
        track_rows = await self._db.fetch_all(
            f"SELECT * FROM {_TRACKS} WHERE playlist_id = ? ORDER BY position",
            (row["id"],),
        )
        return Playlist(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            tracks=tuple(self._row_to_track(r) for r in track_rows),
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
            is_public=bool(row["is_public"]),
        )

    @staticmethod
    def _track_params(playlist_id: str, position: int, track: Track) -> tuple[Any, ...]:
        return (
            playlist_id,
            position,
            track.id.value,
            track.title,
            track.url,
            track.author,
            track.duration_seconds,
            track.thumbnail_url,
            track.requested_by_id,
            track.requested_by_name,
            UtcDateTime(track.added_at).iso if track.added_at else None,
        )

    @staticmethod
    def _row_to_track(row: dict[str, Any]) -> Track:
        return Track(
            id=TrackId(row["track_id"]),
            title=row["title"],
            url=row["url"],
            author=row["author"],
            duration_seconds=row["duration_seconds"],
            thumbnail_url=row["thumbnail_url"],
            requested_by_id=row["requested_by_id"],
            requested_by_name=row["requested_by_name"],
            added_at=UtcDateTime.from_iso(row["added_at"]).dt if row["added_at"] else None,
        )
