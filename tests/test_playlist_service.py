"""
Tests for PlaylistService and the SQLite playlist repository.
"""

import asyncio
import gc

import pytest
import pytest_asyncio

from guild_music_engine.application.services.playlist_service import PlaylistService
from guild_music_engine.application.services.results import ControlStatus
from guild_music_engine.domain.shared.constants import LimitConstants

OWNER = 111
OTHER_OWNER = 222


@pytest_asyncio.fixture
async def service(playlist_repository):
    return PlaylistService(playlist_repository, choice_limit=3)


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_empty_playlist(self, service):
        result = await service.create(OWNER, "Road Trip")

        assert result
        assert result.playlist.name == "Road Trip"
        assert result.playlist.track_count == 0
        assert result.playlist.id.startswith(f"{OWNER}_")

    @pytest.mark.asyncio
    async def test_duplicate_name_is_case_insensitive(self, service):
        await service.create(OWNER, "Road Trip")

        result = await service.create(OWNER, "  road TRIP ")

        assert not result
        assert result.status is ControlStatus.DUPLICATE_NAME

    @pytest.mark.asyncio
    async def test_same_name_for_different_owners(self, service):
        assert await service.create(OWNER, "Mix")
        assert await service.create(OTHER_OWNER, "Mix")

    @pytest.mark.asyncio
    async def test_rapid_creates_get_distinct_ids(self, service):
        results = [await service.create(OWNER, f"List {i}") for i in range(4)]

        assert all(results)
        assert len({r.playlist.id for r in results}) == 4

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_creates_one(self, service):
        results = await asyncio.gather(*(service.create(OWNER, "Same") for _ in range(3)))

        assert sum(1 for r in results if r) == 1
        assert len(await service.list(OWNER)) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", "x" * (LimitConstants.MAX_PLAYLIST_NAME_LENGTH + 1)])
    async def test_invalid_name_is_rejected(self, service, name):
        result = await service.create(OWNER, name)

        assert not result
        assert result.status is ControlStatus.INVALID_NAME
        assert await service.list(OWNER) == []

    @pytest.mark.asyncio
    async def test_name_at_length_limit_is_accepted(self, service):
        name = "x" * LimitConstants.MAX_PLAYLIST_NAME_LENGTH

        result = await service.create(OWNER, f"  {name}  ")

        assert result
        assert result.playlist.name == name

    @pytest.mark.asyncio
    async def test_owner_lock_is_released_after_create(self, service):
        await service.create(OWNER, "Mix")
        await service.create(OTHER_OWNER, "Mix")
        gc.collect()

        assert len(service._owner_locks) == 0


class TestSaveAndLoad:
    @pytest.mark.asyncio
    async def test_save_empty_snapshot_fails(self, service):
        result = await service.save(OWNER, "Nothing", [])

        assert result.status is ControlStatus.QUEUE_EMPTY
        assert await service.list(OWNER) == []

    @pytest.mark.asyncio
    async def test_save_with_blank_name_fails(self, service, sample_tracks):
        result = await service.save(OWNER, " ", sample_tracks)

        assert result.status is ControlStatus.INVALID_NAME
        assert await service.list(OWNER) == []

    @pytest.mark.asyncio
    async def test_save_then_load_preserves_order(self, service, sample_tracks):
        stamped = [t.with_requester(5, "dj") for t in sample_tracks]
        saved = await service.save(OWNER, "Set", stamped)

        loaded = await service.load(saved.playlist.id)

        assert [str(t.id) for t in loaded] == ["t1", "t2", "t3", "t4", "t5"]
        assert loaded[0].title == sample_tracks[0].title
        assert loaded[0].duration_seconds == 101
        assert loaded[0].requested_by_name == "dj"

    @pytest.mark.asyncio
    async def test_saved_tracks_have_no_stream_url(self, service, sample_track):
        saved = await service.save(OWNER, "One", [sample_track])

        loaded = await service.load(saved.playlist.id)

        assert loaded[0].stream_url is None

    @pytest.mark.asyncio
    async def test_load_unknown_returns_none(self, service):
        assert await service.load("missing") is None

    @pytest.mark.asyncio
    async def test_get_by_name_ignores_case(self, service, sample_track):
        await service.save(OWNER, "Chill Vibes", [sample_track])

        found = await service.get_by_name(OWNER, "chill vibes")

        assert found is not None
        assert found.name == "Chill Vibes"


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_existing(self, service):
        await service.create(OWNER, "Gone")

        result = await service.delete(OWNER, "GONE")

        assert result
        assert await service.get_by_name(OWNER, "Gone") is None

    @pytest.mark.asyncio
    async def test_delete_missing(self, service):
        result = await service.delete(OWNER, "Never")

        assert result.status is ControlStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_other_owners_playlist(self, service):
        await service.create(OTHER_OWNER, "Theirs")

        result = await service.delete(OWNER, "Theirs")

        assert result.status is ControlStatus.NOT_FOUND
        assert await service.get_by_name(OTHER_OWNER, "Theirs") is not None

    @pytest.mark.asyncio
    async def test_delete_removes_tracks(self, service, sample_tracks):
        saved = await service.save(OWNER, "Full", sample_tracks)

        await service.delete(OWNER, "Full")

        assert await service.load(saved.playlist.id) is None


class TestListAndAutocomplete:
    @pytest.mark.asyncio
    async def test_list_is_per_owner(self, service):
        await service.create(OWNER, "A")
        await service.create(OWNER, "B")
        await service.create(OTHER_OWNER, "C")

        names = [p.name for p in await service.list(OWNER)]

        assert sorted(names) == ["A", "B"]

    @pytest.mark.asyncio
    async def test_autocomplete_substring(self, service):
        for name in ("Summer Hits", "Winter", "hits of 90s"):
            await service.create(OWNER, name)

        names = {p.name for p in await service.autocomplete(OWNER, "HITS")}

        assert names == {"Summer Hits", "hits of 90s"}

    @pytest.mark.asyncio
    async def test_autocomplete_respects_limit(self, service):
        for i in range(5):
            await service.create(OWNER, f"mix {i}")

        assert len(await service.autocomplete(OWNER, "mix")) == 3

    @pytest.mark.asyncio
    async def test_autocomplete_empty_partial_lists_all(self, service):
        await service.create(OWNER, "Only")

        assert [p.name for p in await service.autocomplete(OWNER, "")] == ["Only"]
