"""
Domain Events and EventBus Tests

Tests event defaults, subscription management and handler isolation.
"""

import asyncio

import pytest
from pydantic import ValidationError

from guild_music_engine.domain.shared.events import (
    DomainEvent,
    EventBus,
    GuildEvicted,
    PlaybackStopped,
    QueueChanged,
    TrackStarted,
    get_event_bus,
    reset_event_bus,
)


class TestDomainEvents:
    def test_event_ids_are_unique(self):
        assert DomainEvent().event_id != DomainEvent().event_id

    def test_occurred_at_is_utc(self):
        assert GuildEvicted(guild_id=1).occurred_at.utcoffset().total_seconds() == 0

    def test_events_are_frozen(self):
        event = QueueChanged(guild_id=1, track_count=3)

        with pytest.raises(ValidationError):
            event.track_count = 4

    def test_track_started_defaults(self):
        event = TrackStarted(guild_id=1, track_id="a", track_title="Song")

        assert event.start_offset == 0.0
        assert event.duration_seconds is None

    def test_invalid_guild_rejected(self):
        with pytest.raises(ValidationError):
            PlaybackStopped(guild_id=0)


class TestEventBus:
    @pytest.mark.asyncio
    async def test_publish_with_no_handlers(self):
        await EventBus().publish(GuildEvicted(guild_id=1))

    @pytest.mark.asyncio
    async def test_handlers_receive_only_their_type(self):
        bus = EventBus()
        evicted: list[GuildEvicted] = []
        stopped: list[PlaybackStopped] = []

        async def on_evicted(event: GuildEvicted) -> None:
            evicted.append(event)

        async def on_stopped(event: PlaybackStopped) -> None:
            stopped.append(event)

        bus.subscribe(GuildEvicted, on_evicted)
        bus.subscribe(PlaybackStopped, on_stopped)
        await bus.publish(GuildEvicted(guild_id=5))

        assert [e.guild_id for e in evicted] == [5]
        assert stopped == []

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        bus = EventBus()
        calls: list[DomainEvent] = []

        async def handler(event: GuildEvicted) -> None:
            calls.append(event)

        bus.subscribe(GuildEvicted, handler)
        bus.unsubscribe(GuildEvicted, handler)
        bus.unsubscribe(GuildEvicted, handler)
        await bus.publish(GuildEvicted(guild_id=1))

        assert calls == []

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        calls: list[int] = []

        async def broken(event: GuildEvicted) -> None:
            raise RuntimeError("handler bug")

        async def working(event: GuildEvicted) -> None:
            calls.append(event.guild_id)

        bus.subscribe(GuildEvicted, broken)
        bus.subscribe(GuildEvicted, working)
        await bus.publish(GuildEvicted(guild_id=9))

        assert calls == [9]

    @pytest.mark.asyncio
    async def test_handlers_run_concurrently(self):
        bus = EventBus()
        gate = asyncio.Event()

        async def waiter(event: GuildEvicted) -> None:
            await gate.wait()

        async def opener(event: GuildEvicted) -> None:
            gate.set()

        bus.subscribe(GuildEvicted, waiter)
        bus.subscribe(GuildEvicted, opener)

        await asyncio.wait_for(bus.publish(GuildEvicted(guild_id=1)), timeout=1.0)

    @pytest.mark.asyncio
    async def test_clear(self):
        bus = EventBus()
        calls: list[DomainEvent] = []

        async def handler(event: GuildEvicted) -> None:
            calls.append(event)

        bus.subscribe(GuildEvicted, handler)
        bus.clear()
        await bus.publish(GuildEvicted(guild_id=1))

        assert calls == []


class TestGlobalBus:
    def test_singleton(self):
        assert get_event_bus() is get_event_bus()

    def test_reset_creates_new_bus(self):
        first = get_event_bus()

        reset_event_bus()

        assert get_event_bus() is not first
