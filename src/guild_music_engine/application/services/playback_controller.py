"""Per-guild playback state machine.

A ``PlaybackController`` owns one guild's ``GuildQueue`` and its audio stream.
Every public operation runs under the controller's own ``asyncio.Lock`` so
commands and stream events for one guild are applied in arrival order, while
other guilds proceed independently.

Two counters make concurrent work safe:

* ``generation`` is bumped by ``stop()``. Work started under an older
  generation (resolutions, stream opens) is cancelled or its result dropped.
* ``stream_id`` identifies the stream currently open. Completion events for
  any other id are stale, since closing a stream still fires its callback.

Domain events raised during an operation are published after its lock is
released, so slow subscribers never hold up the guild.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import AsyncIterator, Awaitable, Callable, Coroutine
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, TypeVar

from ...domain.music.entities import GuildQueue, QueueSnapshot, Track
from ...domain.music.filters import AudioFilter, FilterChain, FilterPreset
from ...domain.music.value_objects import LoopMode, PlaybackState, StopReason
from ...domain.shared.constants import LimitConstants
from ...domain.shared.events import (
    DomainEvent,
    EventBus,
    PlaybackFailed,
    PlaybackStopped,
    QueueChanged,
    TrackFinished,
    TrackStarted,
    get_event_bus,
)
from ...domain.shared.messages import LogTemplates
from .results import ControlResult, ControlStatus, PlayResult

if TYPE_CHECKING:
    from ..interfaces.audio_transport import AudioTransport, StreamHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")
EvictCallback = Callable[[int, "PlaybackController"], Awaitable[None]]


class PlaybackClock:
    """Tracks the elapsed stream position, excluding paused spans."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._offset = 0.0
        self._started_at: float | None = None

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def start(self, offset: float = 0.0) -> None:
        self._offset = max(0.0, offset)
        self._started_at = self._clock()

    def pause(self) -> None:
        if self._started_at is not None:
            self._offset += self._clock() - self._started_at
            self._started_at = None

    def resume(self) -> None:
        if self._started_at is None:
            self._started_at = self._clock()

    def reset(self) -> None:
        self._offset = 0.0
        self._started_at = None

    def elapsed(self) -> float:
        if self._started_at is None:
            return self._offset
        return self._offset + (self._clock() - self._started_at)


class PlaybackController:
    """Serialized playback state machine for a single guild."""

    def __init__(
        self,
        guild_id: int,
        *,
        transport: AudioTransport,
        event_bus: EventBus | None = None,
        on_evict: EvictCallback | None = None,
        default_volume: int = LimitConstants.DEFAULT_VOLUME,
        history_depth: int = LimitConstants.DEFAULT_HISTORY_DEPTH,
        stream_open_retries: int = 1,
        retry_backoff_seconds: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self._queue = GuildQueue(guild_id=guild_id, volume=default_volume, history_depth=history_depth)
        self._transport = transport
        self._event_bus = event_bus or get_event_bus()
        self._on_evict = on_evict
        self._stream_open_retries = max(0, stream_open_retries)
        self._retry_backoff = retry_backoff_seconds
        self._rng = rng or random.Random()

        self._lock = asyncio.Lock()
        self._outbox: list[DomainEvent] = []
        self._clock = PlaybackClock(clock)
        self._generation = 0
        self._pending: set[asyncio.Future[Any]] = set()
        self._stream_id: int | None = None
        self._channel_id: int | None = None
        self._retired = False

    # ── Introspection ────────────────────────────────────────────────

    @property
    def guild_id(self) -> int:
        return self._queue.guild_id

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> PlaybackState:
        return self._queue.state

    @property
    def is_retired(self) -> bool:
        return self._retired

    @property
    def stream_id(self) -> int | None:
        return self._stream_id

    @property
    def channel_id(self) -> int | None:
        return self._channel_id

    def idle_seconds(self) -> float:
        return self._queue.idle_seconds()

    def is_idle_for(self, timeout_seconds: float) -> bool:
        return self._queue.state != PlaybackState.PLAYING and self._queue.idle_seconds() > timeout_seconds

    def snapshot(self) -> QueueSnapshot:
        elapsed = self._clock.elapsed() if self._queue.state.is_active else 0.0
        return self._queue.snapshot(elapsed)

    # ── Serialization ────────────────────────────────────────────────

    @asynccontextmanager
    async def _serialized(self) -> AsyncIterator[None]:
        """Hold the guild lock, then publish the events queued under it once released."""
        try:
            async with self._lock:
                yield
        finally:
            events, self._outbox = self._outbox, []
            for event in events:
                await self._event_bus.publish(event)

    def _emit(self, event: DomainEvent) -> None:
        self._outbox.append(event)

    # ── Cancellable work ─────────────────────────────────────────────

    async def _tracked(self, coro: Coroutine[Any, Any, T]) -> asyncio.Future[T]:
        """Run ``coro`` as a task that ``stop()`` can cancel, and return the finished task."""
        task = asyncio.ensure_future(coro)
        self._pending.add(task)
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            self._pending.discard(task)
        return task

    async def run_cancellable(self, coro: Coroutine[Any, Any, T]) -> T | None:
        """Run work outside the lock on behalf of this guild.

        Returns None when ``stop()`` cancelled the work or ran while it was in
        flight. Exceptions raised by ``coro`` propagate.
        """
        generation = self._generation
        task = await self._tracked(coro)
        if task.cancelled():
            return None
        if generation != self._generation:
            # Retrieve so a late failure is not reported as unhandled.
            task.exception()
            return None
        return task.result()

    # ── Commands ─────────────────────────────────────────────────────

    async def enqueue(
        self,
        tracks: list[Track],
        *,
        to_front: bool = False,
        shuffle_incoming: bool = False,
        channel_id: int | None = None,
        generation: int | None = None,
    ) -> PlayResult:
        """Add a batch of tracks and start playback if nothing is running."""
        async with self._serialized():
            if generation is not None and generation != self._generation:
                logger.info(LogTemplates.QUEUE_RESOLUTION_DISCARDED, len(tracks), self.guild_id)
                return PlayResult.fail(ControlStatus.CANCELLED, self.snapshot())
            if self._retired:
                return PlayResult.fail(ControlStatus.RETIRED)
            if not tracks:
                return PlayResult.fail(ControlStatus.RESOLUTION_FAILED, self.snapshot())

            batch = list(tracks)
            if shuffle_incoming:
                self._rng.shuffle(batch)

            position = self._queue.enqueue(batch, to_front=to_front)
            logger.info(LogTemplates.QUEUE_ENQUEUED, len(batch), self.guild_id, to_front, shuffle_incoming)
            self._emit(
                QueueChanged(guild_id=self.guild_id, track_count=len(self._queue.tracks), added=len(batch))
            )

            started = False
            if self._queue.state.needs_start:
                if not await self._ensure_connected(channel_id):
                    del self._queue.tracks[position : position + len(batch)]
                    logger.warning(LogTemplates.PLAYBACK_CONNECT_FAILED, channel_id, self.guild_id)
                    if not self._queue.tracks:
                        await self._teardown(StopReason.DISCONNECT)
                    return PlayResult.fail(ControlStatus.CONNECT_FAILED, self.snapshot())
                current_generation = self._generation
                started = await self._start_head()
                if current_generation != self._generation:
                    return PlayResult.fail(ControlStatus.CANCELLED, self.snapshot())

            return PlayResult.ok(self.snapshot(), tuple(batch), position, started)

    async def skip(self, count: int = 1) -> ControlResult:
        async with self._serialized():
            if self._retired:
                return ControlResult.fail(ControlStatus.RETIRED)
            if not self._queue.tracks:
                return ControlResult.fail(ControlStatus.QUEUE_EMPTY, self.snapshot())

            was_active = self._queue.state.is_active
            amount = min(max(count, 1), len(self._queue.tracks))
            removed = self._queue.take_leading(amount)
            if was_active:
                current = removed[0]
                self._queue.record_history(current)
                self._emit(
                    TrackFinished(
                        guild_id=self.guild_id,
                        track_id=str(current.id),
                        track_title=current.title,
                        was_skipped=True,
                    )
                )
            if self._queue.loop_mode == LoopMode.QUEUE:
                self._queue.tracks.extend(removed)
            logger.info(LogTemplates.TRACK_SKIPPED, amount, self.guild_id)

            await self._close_stream()
            if not self._queue.tracks:
                await self._teardown(StopReason.NO_MORE_TRACKS)
            elif was_active:
                await self._start_head()
            return ControlResult.ok(self.snapshot(), value=amount)

    async def previous(self) -> ControlResult:
        async with self._serialized():
            if self._retired:
                return ControlResult.fail(ControlStatus.RETIRED)
            if not self._queue.history:
                return ControlResult.fail(ControlStatus.NO_HISTORY, self.snapshot())
            if self._queue.state.needs_start and not await self._ensure_connected():
                logger.warning(LogTemplates.PLAYBACK_CONNECT_FAILED, self._channel_id, self.guild_id)
                return ControlResult.fail(ControlStatus.CONNECT_FAILED, self.snapshot())

            track = self._queue.pop_history()
            assert track is not None
            self._queue.push_front(track)
            logger.info(LogTemplates.TRACK_PREVIOUS, track.title, self.guild_id)
            await self._close_stream()
            await self._start_head()
            return ControlResult.ok(self.snapshot(), value=track)

    async def pause(self) -> ControlResult:
        async with self._serialized():
            if self._retired:
                return ControlResult.fail(ControlStatus.RETIRED)
            if self._queue.state == PlaybackState.PAUSED:
                return ControlResult(status=ControlStatus.ALREADY, snapshot=self.snapshot())
            if self._queue.state != PlaybackState.PLAYING:
                return ControlResult.fail(ControlStatus.NOT_PLAYING, self.snapshot())

            await self._transport.pause(self.guild_id)
            self._clock.pause()
            self._queue.transition_to(PlaybackState.PAUSED)
            logger.info(LogTemplates.PLAYBACK_PAUSED, self.guild_id)
            return ControlResult.ok(self.snapshot())

    async def resume(self) -> ControlResult:
        async with self._serialized():
            if self._retired:
                return ControlResult.fail(ControlStatus.RETIRED)
            if self._queue.state == PlaybackState.PLAYING:
                return ControlResult(status=ControlStatus.ALREADY, snapshot=self.snapshot())
            if self._queue.state != PlaybackState.PAUSED:
                return ControlResult.fail(ControlStatus.NOT_PLAYING, self.snapshot())

            await self._transport.resume(self.guild_id)
            self._clock.resume()
            self._queue.transition_to(PlaybackState.PLAYING)
            logger.info(LogTemplates.PLAYBACK_RESUMED, self.guild_id)
            return ControlResult.ok(self.snapshot())

    async def stop(self) -> ControlResult:
        """Clear the queue, leave voice, and retire this controller.

        Pending resolutions and stream opens are cancelled before the lock is
        taken, so a stop never waits behind a slow open.
        """
        self._generation += 1
        for task in list(self._pending):
            task.cancel()

        async with self._serialized():
            if self._retired:
                return ControlResult.fail(ControlStatus.RETIRED)
            cleared = self._queue.clear_tracks()
            await self._teardown(StopReason.USER_REQUEST)
            return ControlResult.ok(self.snapshot(), value=cleared)

    async def shuffle(self) -> ControlResult:
        async with self._serialized():
            if self._retired:
                return ControlResult.fail(ControlStatus.RETIRED)
            if self._queue.upcoming_count < 2:
                return ControlResult.fail(ControlStatus.NOT_ENOUGH_TRACKS, self.snapshot())

            self._queue.shuffle_upcoming(self._rng)
            logger.info(LogTemplates.QUEUE_SHUFFLED, self.guild_id)
            self._emit(
                QueueChanged(guild_id=self.guild_id, track_count=len(self._queue.tracks))
            )
            return ControlResult.ok(self.snapshot())

    async def set_loop(self, mode: LoopMode) -> ControlResult:
        async with self._serialized():
            if self._retired:
                return ControlResult.fail(ControlStatus.RETIRED)
            self._queue.set_loop_mode(mode)
            logger.info(LogTemplates.LOOP_MODE_CHANGED, mode.value, self.guild_id)
            return ControlResult.ok(self.snapshot(), value=mode)

    async def cycle_loop(self) -> ControlResult:
        async with self._serialized():
            if self._retired:
                return ControlResult.fail(ControlStatus.RETIRED)
            mode = self._queue.loop_mode.next_mode()
            self._queue.set_loop_mode(mode)
            logger.info(LogTemplates.LOOP_MODE_CHANGED, mode.value, self.guild_id)
            return ControlResult.ok(self.snapshot(), value=mode)

    async def set_volume(self, level: int) -> int:
        """Clamp and store the volume, applying it to the live stream in place."""
        async with self._serialized():
            volume = self._queue.set_volume(level)
            if self._queue.state.is_active:
                await self._transport.set_volume(self.guild_id, volume)
            logger.info(LogTemplates.PLAYBACK_VOLUME, volume, self.guild_id)
            return volume

    async def toggle_filter(self, audio_filter: AudioFilter) -> ControlResult:
        return await self._change_filters(lambda chain: chain.toggled(audio_filter))

    async def clear_filters(self) -> ControlResult:
        return await self._change_filters(lambda chain: chain.cleared())

    async def apply_preset(self, preset: FilterPreset) -> ControlResult:
        return await self._change_filters(lambda _chain: FilterChain.from_preset(preset))

    async def _change_filters(self, change: Callable[[FilterChain], FilterChain]) -> ControlResult:
        async with self._serialized():
            if self._retired:
                return ControlResult.fail(ControlStatus.RETIRED)
            chain = change(self._queue.filters)
            self._queue.set_filters(chain)
            logger.info(LogTemplates.FILTERS_CHANGED, ",".join(chain.names) or "none", self.guild_id)
            if self._queue.state.is_active:
                await self._reopen(self._clock.elapsed())
            return ControlResult.ok(self.snapshot(), value=chain)

    async def seek(self, seconds: float) -> ControlResult:
        async with self._serialized():
            if self._retired:
                return ControlResult.fail(ControlStatus.RETIRED)
            if not self._queue.state.is_active or not self._queue.tracks:
                return ControlResult.fail(ControlStatus.NOT_PLAYING, self.snapshot())

            target = max(0.0, float(seconds))
            duration = self._queue.tracks[0].duration_seconds
            if duration:
                target = min(target, float(duration))
            logger.info(LogTemplates.PLAYBACK_SEEK, target, self.guild_id)
            await self._reopen(target)
            return ControlResult.ok(self.snapshot(), value=target)

    async def shutdown_if_idle(self, timeout_seconds: float) -> bool:
        """Tear down when still idle past ``timeout_seconds``. Used by the idle sweep."""
        async with self._serialized():
            if self._retired or not self.is_idle_for(timeout_seconds):
                return False
            self._queue.clear_tracks()
            await self._teardown(StopReason.INACTIVITY)
            return True

    async def release_if_unused(self) -> bool:
        """Evict a controller that never got any tracks, e.g. after a failed first play."""
        async with self._serialized():
            if self._retired or self._queue.state != PlaybackState.IDLE or self._queue.tracks:
                return False
            self._queue.transition_to(PlaybackState.STOPPED)
            await self._evict()
            return True

    async def shutdown(self, reason: StopReason = StopReason.INACTIVITY) -> None:
        """Unconditional teardown, used when the bot closes."""
        self._generation += 1
        for task in list(self._pending):
            task.cancel()
        async with self._serialized():
            if self._retired:
                return
            self._queue.clear_tracks()
            await self._teardown(reason)

    # ── Transport events ─────────────────────────────────────────────

    async def handle_stream_end(self, stream_id: int, error: Exception | None = None) -> None:
        async with self._serialized():
            if self._retired or stream_id != self._stream_id:
                logger.debug(LogTemplates.STREAM_STALE_EVENT, stream_id, self.guild_id, self._stream_id)
                return
            self._stream_id = None
            self._clock.reset()
            if not self._queue.tracks:
                await self._teardown(StopReason.NO_MORE_TRACKS)
                return

            head = self._queue.tracks[0]
            logger.info(LogTemplates.TRACK_FINISHED, head.title, self.guild_id, self._queue.loop_mode.value)

            if error is not None:
                logger.warning(LogTemplates.PLAYBACK_FAILED, head.title, self.guild_id, error)
                self._emit(
                    PlaybackFailed(
                        guild_id=self.guild_id,
                        track_id=str(head.id),
                        track_title=head.title,
                        reason=str(error),
                    )
                )
                self._queue.pop_head()
                self._queue.record_history(head)
            else:
                self._emit(
                    TrackFinished(guild_id=self.guild_id, track_id=str(head.id), track_title=head.title)
                )
                if self._queue.loop_mode != LoopMode.TRACK:
                    self._queue.pop_head()
                    self._queue.record_history(head)
                    if self._queue.loop_mode == LoopMode.QUEUE:
                        self._queue.tracks.append(head)

            if self._queue.tracks:
                await self._start_head()
            else:
                logger.info(LogTemplates.PLAYBACK_EXHAUSTED, self.guild_id)
                await self._teardown(StopReason.NO_MORE_TRACKS)

    async def handle_disconnect(self) -> None:
        """The voice link dropped: stop, keep the tracks, let the sweep or a new play decide."""
        async with self._serialized():
            if self._retired:
                return
            logger.info(LogTemplates.VOICE_LINK_LOST, self.guild_id)
            self._channel_id = None
            await self._close_stream()
            if self._queue.state != PlaybackState.STOPPED:
                self._queue.transition_to(PlaybackState.STOPPED)
            self._emit(
                PlaybackStopped(guild_id=self.guild_id, reason=StopReason.DISCONNECT.value)
            )
            if not self._queue.tracks:
                await self._evict()

    # ── Internals (lock held) ────────────────────────────────────────

    async def _ensure_connected(self, channel_id: int | None = None) -> bool:
        channel = channel_id or self._channel_id
        if channel is None:
            return self._transport.is_connected(self.guild_id)
        if channel == self._channel_id and self._transport.is_connected(self.guild_id):
            return True
        if not await self._transport.connect(self.guild_id, channel):
            return False
        self._channel_id = channel
        return True

    async def _start_head(self, start_offset: float = 0.0) -> bool:
        """Open a stream for ``tracks[0]``, dropping tracks that cannot be opened."""
        generation = self._generation
        while self._queue.tracks:
            track = self._queue.tracks[0]
            if self._queue.state != PlaybackState.CONNECTING:
                self._queue.transition_to(PlaybackState.CONNECTING)

            handle = await self._open_with_retry(track, start_offset, generation)
            if generation != self._generation:
                return False
            if handle is None:
                logger.warning(LogTemplates.STREAM_OPEN_GAVE_UP, track.title, self.guild_id, self._stream_open_retries + 1)
                self._queue.pop_head()
                self._emit(
                    PlaybackFailed(
                        guild_id=self.guild_id,
                        track_id=str(track.id),
                        track_title=track.title,
                        reason="stream_open_failed",
                    )
                )
                start_offset = 0.0
                continue

            self._stream_id = handle.stream_id
            self._clock.start(start_offset)
            self._queue.transition_to(PlaybackState.PLAYING)
            logger.info(LogTemplates.PLAYBACK_STARTED, track.title, self.guild_id)
            self._emit(
                TrackStarted(
                    guild_id=self.guild_id,
                    track_id=str(track.id),
                    track_title=track.title,
                    track_url=track.url,
                    duration_seconds=track.duration_seconds,
                    start_offset=start_offset,
                )
            )
            return True

        logger.info(LogTemplates.PLAYBACK_EXHAUSTED, self.guild_id)
        await self._teardown(StopReason.NO_MORE_TRACKS)
        return False

    async def _open_with_retry(self, track: Track, start_offset: float, generation: int) -> StreamHandle | None:
        attempts = self._stream_open_retries + 1
        for attempt in range(attempts):
            task = await self._tracked(
                self._transport.open(
                    self.guild_id, track, self._queue.filters, self._queue.volume, start_offset
                )
            )
            if task.cancelled():
                return None
            if generation != self._generation:
                if task.exception() is None:
                    logger.info(LogTemplates.STREAM_DISCARDED, self.guild_id)
                    await self._transport.close(self.guild_id)
                return None

            error = task.exception()
            if error is None:
                return task.result()
            logger.warning(
                LogTemplates.STREAM_OPEN_FAILED, track.title, self.guild_id, attempt + 1, attempts, error
            )
            if attempt + 1 < attempts:
                backoff = await self._tracked(asyncio.sleep(self._retry_backoff * 2**attempt))
                if backoff.cancelled() or generation != self._generation:
                    return None
        return None

    async def _reopen(self, offset: float) -> None:
        was_paused = self._queue.state == PlaybackState.PAUSED
        logger.info(LogTemplates.STREAM_REOPENING, self._queue.tracks[0].title, self.guild_id, round(offset, 2))
        await self._close_stream()
        if await self._start_head(start_offset=offset) and was_paused:
            await self._transport.pause(self.guild_id)
            self._clock.pause()
            self._queue.transition_to(PlaybackState.PAUSED)

    async def _close_stream(self) -> None:
        self._stream_id = None
        self._clock.reset()
        await self._transport.close(self.guild_id)

    async def _teardown(self, reason: StopReason) -> None:
        await self._close_stream()
        await self._transport.disconnect(self.guild_id)
        self._channel_id = None
        if self._queue.state != PlaybackState.STOPPED:
            self._queue.transition_to(PlaybackState.STOPPED)
        logger.info(LogTemplates.PLAYBACK_STOPPED, self.guild_id)
        self._emit(PlaybackStopped(guild_id=self.guild_id, reason=reason.value))
        await self._evict()

    async def _evict(self) -> None:
        if self._retired:
            return
        self._retired = True
        if self._on_evict is not None:
            await self._on_evict(self.guild_id, self)
