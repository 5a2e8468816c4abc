"""Music engine facade consumed by the Discord command surface.

Callers go through ``MusicEngine`` rather than touching controllers. It looks
up the guild's controller in the registry, issues one operation, and hands
back a typed result carrying a ``QueueSnapshot`` to render.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...domain.music.entities import QueueSnapshot, Track
from ...domain.music.filters import AudioFilter, FilterPreset
from ...domain.music.value_objects import LoopMode
from ...domain.shared.exceptions import ResolutionFailedError
from ...domain.shared.messages import LogTemplates
from .results import ControlResult, ControlStatus, PlaylistResult, PlayResult

if TYPE_CHECKING:
    from ...config.settings import AudioSettings
    from ...domain.music.entities import TrackCandidate
    from ...domain.music.playlist import Playlist
    from ..interfaces.audio_transport import AudioTransport
    from ..interfaces.track_resolver import TrackResolver
    from .playback_controller import PlaybackController
    from .playlist_service import PlaylistService
    from .rate_limiter import RateLimitAction, RateLimiter
    from .registry import GuildQueueRegistry
    from .search_service import SearchService

logger = logging.getLogger(__name__)

ControllerOp = Callable[["PlaybackController"], Awaitable[ControlResult]]

_MAX_RETIRED_RETRIES = 3


@dataclass(frozen=True)
class PlayContext:
    """Who asked for playback, and where to play it."""

    guild_id: int
    user_id: int
    user_name: str
    voice_channel_id: int | None = None


class MusicEngine:
    def __init__(
        self,
        *,
        registry: GuildQueueRegistry,
        resolver: TrackResolver,
        transport: AudioTransport,
        playlists: PlaylistService,
        search: SearchService,
        rate_limiter: RateLimiter,
        settings: AudioSettings,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._transport = transport
        self._playlists = playlists
        self._search = search
        self._rate_limiter = rate_limiter
        self._settings = settings

        self._transport.set_event_handlers(self._on_stream_end, self._on_disconnect)

    @property
    def registry(self) -> GuildQueueRegistry:
        return self._registry

    # ── Transport events ─────────────────────────────────────────────

    async def _on_stream_end(self, guild_id: int, stream_id: int, error: Exception | None) -> None:
        controller = self._registry.get_if_exists(guild_id)
        if controller is None:
            logger.debug(LogTemplates.STREAM_NO_HANDLER, guild_id)
            return
        await controller.handle_stream_end(stream_id, error)

    async def _on_disconnect(self, guild_id: int) -> None:
        controller = self._registry.get_if_exists(guild_id)
        if controller is not None:
            await controller.handle_disconnect()

    # ── Playback ─────────────────────────────────────────────────────

    async def allow(self, user_id: int, action: RateLimitAction) -> ControlResult:
        """Check a user's cooldown. A refusal carries ``retry_after`` as its value."""
        allowed, retry_after = await self._rate_limiter.allow(user_id, action)
        if allowed:
            return ControlResult.ok()
        return ControlResult(status=ControlStatus.RATE_LIMITED, value=retry_after)

    async def play(
        self,
        context: PlayContext,
        query: str,
        *,
        shuffle: bool = False,
        add_to_top: bool = False,
    ) -> PlayResult:
        """Resolve ``query`` and enqueue the result for the requesting user."""
        controller = await self._registry.get_or_create(context.guild_id)
        generation = controller.generation

        try:
            tracks = await controller.run_cancellable(
                self._resolver.resolve(query, self._settings.playlist_extract_limit)
            )
        except ResolutionFailedError as e:
            logger.warning(LogTemplates.RESOLUTION_FAILED.format(error=e.message))
            await controller.release_if_unused()
            return PlayResult.fail(ControlStatus.RESOLUTION_FAILED, self.get_queue(context.guild_id))

        if tracks is None:
            return PlayResult.fail(ControlStatus.CANCELLED, self.get_queue(context.guild_id))
        if not tracks:
            await controller.release_if_unused()
            return PlayResult.fail(ControlStatus.RESOLUTION_FAILED, self.get_queue(context.guild_id))

        stamped = [t.with_requester(context.user_id, context.user_name) for t in tracks]
        return await self._enqueue(context, controller, stamped, generation, shuffle=shuffle, to_front=add_to_top)

    async def _enqueue(
        self,
        context: PlayContext,
        controller: PlaybackController,
        tracks: list[Track],
        generation: int | None,
        *,
        shuffle: bool,
        to_front: bool,
    ) -> PlayResult:
        for _ in range(_MAX_RETIRED_RETRIES):
            result = await controller.enqueue(
                tracks,
                to_front=to_front,
                shuffle_incoming=shuffle,
                channel_id=context.voice_channel_id,
                generation=generation,
            )
            if result.status != ControlStatus.RETIRED:
                return result
            logger.info(LogTemplates.REGISTRY_RETIRED_RETRY, context.guild_id)
            controller = await self._registry.get_or_create(context.guild_id)
            generation = None
        return PlayResult.fail(ControlStatus.RETIRED, self.get_queue(context.guild_id))

    def get_queue(self, guild_id: int) -> QueueSnapshot:
        controller = self._registry.get_if_exists(guild_id)
        if controller is None:
            return QueueSnapshot.idle(guild_id, self._settings.default_volume)
        return controller.snapshot()

    async def _existing(self, guild_id: int, op: ControllerOp, missing: ControlStatus) -> ControlResult:
        """Run ``op`` on the guild's controller, without creating one."""
        controller = self._registry.get_if_exists(guild_id)
        for _ in range(_MAX_RETIRED_RETRIES):
            if controller is None:
                break
            result = await op(controller)
            if result.status != ControlStatus.RETIRED:
                return result
            fresh = self._registry.get_if_exists(guild_id)
            controller = fresh if fresh is not controller else None
        return ControlResult.fail(missing, self.get_queue(guild_id))

    async def _settle(self, guild_id: int, op: ControllerOp) -> ControlResult:
        """Run ``op`` on the guild's controller, creating it so settings stick."""
        for _ in range(_MAX_RETIRED_RETRIES):
            controller = await self._registry.get_or_create(guild_id)
            result = await op(controller)
            if result.status != ControlStatus.RETIRED:
                return result
        return ControlResult.fail(ControlStatus.RETIRED, self.get_queue(guild_id))

    async def pause(self, guild_id: int) -> ControlResult:
        return await self._existing(guild_id, lambda c: c.pause(), ControlStatus.NOT_PLAYING)

    async def resume(self, guild_id: int) -> ControlResult:
        return await self._existing(guild_id, lambda c: c.resume(), ControlStatus.NOT_PLAYING)

    async def stop(self, guild_id: int) -> ControlResult:
        return await self._existing(guild_id, lambda c: c.stop(), ControlStatus.NOT_PLAYING)

    async def skip(self, guild_id: int, amount: int = 1) -> ControlResult:
        return await self._existing(guild_id, lambda c: c.skip(amount), ControlStatus.QUEUE_EMPTY)

    async def previous(self, guild_id: int) -> ControlResult:
        return await self._existing(guild_id, lambda c: c.previous(), ControlStatus.NO_HISTORY)

    async def shuffle(self, guild_id: int) -> ControlResult:
        return await self._existing(guild_id, lambda c: c.shuffle(), ControlStatus.NOT_ENOUGH_TRACKS)

    async def seek(self, guild_id: int, seconds: float) -> ControlResult:
        return await self._existing(guild_id, lambda c: c.seek(seconds), ControlStatus.NOT_PLAYING)

    async def set_volume(self, guild_id: int, level: int) -> int:
        for _ in range(_MAX_RETIRED_RETRIES):
            controller = await self._registry.get_or_create(guild_id)
            volume = await controller.set_volume(level)
            if not controller.is_retired:
                return volume
        return volume

    async def set_loop(self, guild_id: int, mode: LoopMode) -> ControlResult:
        return await self._settle(guild_id, lambda c: c.set_loop(mode))

    async def cycle_loop(self, guild_id: int) -> LoopMode:
        result = await self._settle(guild_id, lambda c: c.cycle_loop())
        return result.value if result else self.get_queue(guild_id).loop_mode

    async def toggle_filter(self, guild_id: int, name: str | AudioFilter) -> ControlResult:
        audio_filter = AudioFilter.parse(name)
        return await self._settle(guild_id, lambda c: c.toggle_filter(audio_filter))

    async def clear_filters(self, guild_id: int) -> ControlResult:
        return await self._settle(guild_id, lambda c: c.clear_filters())

    async def apply_preset(self, guild_id: int, preset: str | FilterPreset) -> ControlResult:
        filter_preset = FilterPreset.parse(preset)
        return await self._settle(guild_id, lambda c: c.apply_preset(filter_preset))

    # ── Search ───────────────────────────────────────────────────────

    async def search_songs(self, user_id: int, partial: str, limit: int = 10) -> list[TrackCandidate]:
        return await self._search.search_songs(user_id, partial, limit)

    async def search(self, query: str, limit: int = 10) -> list[TrackCandidate]:
        return await self._search.search_menu(query, limit)

    # ── Playlists ────────────────────────────────────────────────────

    async def create_playlist(self, owner_id: int, name: str) -> PlaylistResult:
        return await self._playlists.create(owner_id, name)

    async def save_from_queue(self, guild_id: int, owner_id: int, name: str) -> PlaylistResult:
        snapshot = self.get_queue(guild_id)
        if not snapshot.tracks:
            return PlaylistResult.fail(ControlStatus.QUEUE_EMPTY)
        return await self._playlists.save(owner_id, name, snapshot.tracks)

    async def load_playlist(self, playlist_id: str) -> list[Track] | None:
        return await self._playlists.load(playlist_id)

    async def load_into(self, context: PlayContext, playlist: str, *, shuffle: bool = False) -> PlayResult:
        """Enqueue a playlist, found by id or by the caller's playlist name."""
        found = await self._playlists.get(playlist)
        if found is None:
            found = await self._playlists.get_by_name(context.user_id, playlist)
        if found is None:
            return PlayResult.fail(ControlStatus.NOT_FOUND, self.get_queue(context.guild_id))
        if not found.tracks:
            return PlayResult.fail(ControlStatus.QUEUE_EMPTY, self.get_queue(context.guild_id))

        tracks = [t.with_requester(context.user_id, context.user_name) for t in found.tracks]
        controller = await self._registry.get_or_create(context.guild_id)
        result = await self._enqueue(context, controller, tracks, controller.generation, shuffle=shuffle, to_front=False)
        if result:
            logger.info(LogTemplates.PLAYLIST_LOADED, found.id, context.guild_id, len(tracks))
        return result

    async def delete_playlist(self, owner_id: int, name: str) -> PlaylistResult:
        return await self._playlists.delete(owner_id, name)

    async def list_playlists(self, owner_id: int) -> list[Playlist]:
        return await self._playlists.list(owner_id)

    async def playlist_choices(self, owner_id: int, partial: str) -> list[Playlist]:
        return await self._playlists.autocomplete(owner_id, partial)

    async def shutdown(self) -> None:
        await self._registry.shutdown_all()
