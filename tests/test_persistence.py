"""Unit tests for the persistence layer.

Tests for the SQLite database wrapper and the playlist repository.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from guild_music_engine.domain.music.playlist import Playlist
from guild_music_engine.infrastructure.persistence.database import Database
from tests.fakes import make_track

OWNER_ID = 333333333
CREATED = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def playlist(name: str, *keys: str, owner_id: int = OWNER_ID, created_at: datetime = CREATED) -> Playlist:
    return Playlist.new(owner_id, name, [make_track(k) for k in keys], created_at=created_at)


# === Database Tests ===


class TestDatabase:
    def test_sqlite_url_prefix_is_stripped(self):
        assert Database("sqlite:///data/music.db").db_path == "data/music.db"
        assert Database(":memory:").is_memory

    @pytest.mark.asyncio
    async def test_initialize_creates_tables(self, in_memory_database):
        rows = await in_memory_database.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table'")

        assert {"playlists", "playlist_tracks"} <= {row["name"] for row in rows}

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, in_memory_database):
        await in_memory_database.initialize()

        assert await in_memory_database.fetch_one("SELECT 1 AS one") == {"one": 1}

    @pytest.mark.asyncio
    async def test_transaction_rollback(self, in_memory_database):
        with pytest.raises(ValueError):
            async with in_memory_database.transaction() as conn:
                await conn.execute(
                    "INSERT INTO playlists (id, owner_id, name, name_key, created_at) VALUES (?, ?, ?, ?, ?)",
                    ("1_1", 1, "Mix", "mix", CREATED.isoformat()),
                )
                raise ValueError("abort")

        assert await in_memory_database.fetch_all("SELECT * FROM playlists") == []

    @pytest.mark.asyncio
    async def test_execute_returns_rowcount(self, in_memory_database):
        count = await in_memory_database.execute(
            "INSERT INTO playlists (id, owner_id, name, name_key, created_at) VALUES (?, ?, ?, ?, ?)",
            ("1_1", 1, "Mix", "mix", CREATED.isoformat()),
        )

        assert count == 1

    @pytest.mark.asyncio
    async def test_file_database_creates_parent(self, tmp_path):
        db = Database(f"sqlite:///{tmp_path}/nested/music.db")

        await db.initialize()
        await db.close()

        assert (tmp_path / "nested" / "music.db").exists()


# === Playlist Repository Tests ===


class TestPlaylistRepository:
    @pytest.mark.asyncio
    async def test_add_and_get_round_trips_tracks(self, playlist_repository):
        stored = playlist("Road Trip", "a", "b", "c")

        assert await playlist_repository.add(stored)
        loaded = await playlist_repository.get(stored.id)

        assert loaded is not None
        assert loaded.name == "Road Trip"
        assert [t.id.value for t in loaded.tracks] == ["a", "b", "c"]
        assert loaded.created_at == CREATED
        assert all(t.stream_url is None for t in loaded.tracks)

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected_case_insensitively(self, playlist_repository):
        assert await playlist_repository.add(playlist("Road Trip"))

        duplicate = playlist("road trip", created_at=CREATED + timedelta(seconds=1))

        assert not await playlist_repository.add(duplicate)
        assert len(await playlist_repository.list_for_owner(OWNER_ID)) == 1

    @pytest.mark.asyncio
    async def test_same_name_for_different_owners(self, playlist_repository):
        assert await playlist_repository.add(playlist("Mix"))
        assert await playlist_repository.add(playlist("Mix", owner_id=999))

    @pytest.mark.asyncio
    async def test_get_by_name(self, playlist_repository):
        await playlist_repository.add(playlist("Chill Vibes", "a"))

        found = await playlist_repository.get_by_name(OWNER_ID, "  CHILL vibes ")

        assert found is not None
        assert found.name == "Chill Vibes"
        assert await playlist_repository.get_by_name(OWNER_ID, "other") is None

    @pytest.mark.asyncio
    async def test_get_missing(self, playlist_repository):
        assert await playlist_repository.get("nope") is None

    @pytest.mark.asyncio
    async def test_list_is_oldest_first(self, playlist_repository):
        await playlist_repository.add(playlist("Second", created_at=CREATED + timedelta(minutes=1)))
        await playlist_repository.add(playlist("First"))
        await playlist_repository.add(playlist("Elsewhere", owner_id=999))

        names = [p.name for p in await playlist_repository.list_for_owner(OWNER_ID)]

        assert names == ["First", "Second"]

    @pytest.mark.asyncio
    async def test_delete_removes_tracks(self, playlist_repository, in_memory_database):
        stored = playlist("Mix", "a", "b")
        await playlist_repository.add(stored)

        assert await playlist_repository.delete(OWNER_ID, "MIX")
        assert await playlist_repository.get(stored.id) is None
        assert await in_memory_database.fetch_all("SELECT * FROM playlist_tracks") == []

    @pytest.mark.asyncio
    async def test_delete_missing(self, playlist_repository):
        assert not await playlist_repository.delete(OWNER_ID, "Nothing")
