"""Playlist Application Service - per-owner playlist CRUD."""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import Iterable
from datetime import timedelta
from typing import TYPE_CHECKING

from ...domain.music.playlist import Playlist, is_valid_playlist_name
from ...domain.shared.constants import LimitConstants
from ...domain.shared.datetime_utils import utcnow
from ...domain.shared.messages import LogTemplates
from .results import ControlStatus, PlaylistResult

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ...domain.music.repository import PlaylistRepository

logger = logging.getLogger(__name__)

_ID_ATTEMPTS = 5


class PlaylistService:
    """Create, load, list, and delete user playlists.

    Writes for one owner are serialized by a per-owner lock. Guild playback
    locks are never taken here.
    """

    def __init__(
        self,
        repository: PlaylistRepository,
        *,
        choice_limit: int = LimitConstants.PLAYLIST_CHOICE_LIMIT,
    ) -> None:
        self._repository = repository
        self._choice_limit = choice_limit
        # entries live only while an operation for the owner holds the lock
        self._owner_locks: weakref.WeakValueDictionary[int, asyncio.Lock] = weakref.WeakValueDictionary()

    def _get_lock(self, owner_id: int) -> asyncio.Lock:
        lock = self._owner_locks.get(owner_id)
        if lock is None:
            lock = asyncio.Lock()
            self._owner_locks[owner_id] = lock
        return lock

    async def create(self, owner_id: int, name: str, tracks: Iterable[Track] = ()) -> PlaylistResult:
        """Create a playlist, failing with ``DUPLICATE_NAME`` if the owner already has it.

        A blank or over-long name is ``INVALID_NAME``.
        """
        if not is_valid_playlist_name(name):
            return PlaylistResult.fail(ControlStatus.INVALID_NAME)

        async with self._get_lock(owner_id):
            if await self._repository.get_by_name(owner_id, name) is not None:
                return PlaylistResult.fail(ControlStatus.DUPLICATE_NAME)

            snapshot = tuple(tracks)
            created = utcnow()
            for attempt in range(_ID_ATTEMPTS):
                # Ids are millisecond-stamped; step past a same-millisecond collision.
                playlist = Playlist.new(owner_id, name, snapshot, created_at=created + timedelta(milliseconds=attempt))
                if await self._repository.add(playlist):
                    break
                if await self._repository.get_by_name(owner_id, name) is not None:
                    return PlaylistResult.fail(ControlStatus.DUPLICATE_NAME)
            else:
                return PlaylistResult.fail(ControlStatus.DUPLICATE_NAME)

            logger.info(LogTemplates.PLAYLIST_CREATED, playlist.id, playlist.name, owner_id, playlist.track_count)
            return PlaylistResult.ok(playlist, playlist.tracks)

    async def save(self, owner_id: int, name: str, tracks: Iterable[Track]) -> PlaylistResult:
        """Create a playlist from a queue snapshot. An empty snapshot is ``QUEUE_EMPTY``."""
        snapshot = tuple(tracks)
        if not snapshot:
            return PlaylistResult.fail(ControlStatus.QUEUE_EMPTY)
        return await self.create(owner_id, name, snapshot)

    async def get(self, playlist_id: str) -> Playlist | None:
        return await self._repository.get(playlist_id)

    async def get_by_name(self, owner_id: int, name: str) -> Playlist | None:
        return await self._repository.get_by_name(owner_id, name)

    async def load(self, playlist_id: str) -> list[Track] | None:
        """Return fresh copies of a playlist's tracks, or None if it does not exist."""
        playlist = await self._repository.get(playlist_id)
        if playlist is None:
            return None
        return list(playlist.tracks)

    async def delete(self, owner_id: int, name: str) -> PlaylistResult:
        async with self._get_lock(owner_id):
            playlist = await self._repository.get_by_name(owner_id, name)
            if playlist is None or not await self._repository.delete(owner_id, name):
                return PlaylistResult.fail(ControlStatus.NOT_FOUND)

            logger.info(LogTemplates.PLAYLIST_DELETED, playlist.id, playlist.name, owner_id)
            return PlaylistResult.ok(playlist)

    async def list(self, owner_id: int) -> list[Playlist]:
        return await self._repository.list_for_owner(owner_id)

    async def autocomplete(self, owner_id: int, partial: str) -> list[Playlist]:
        """Case-insensitive substring match over the owner's playlist names."""
        playlists = await self._repository.list_for_owner(owner_id)
        return [p for p in playlists if p.matches(partial)][: self._choice_limit]
