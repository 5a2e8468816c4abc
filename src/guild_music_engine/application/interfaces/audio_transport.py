"""Port interface for per-guild voice connections and audio streams."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from guild_music_engine.domain.shared.types import ChannelIdField, DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ...domain.music.filters import FilterChain

StreamEndHandler = Callable[[int, int, "Exception | None"], Awaitable[None]]
"""``(guild_id, stream_id, error)``; ``error`` is None on natural completion."""

DisconnectHandler = Callable[[int], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class StreamHandle:
    """Identifies one opened stream. Events carry the same ``stream_id``."""

    guild_id: int
    stream_id: int


class AudioTransport(ABC):
    """Interface for voice connections and the audio stream of each guild."""

    @abstractmethod
    async def connect(self, guild_id: DiscordSnowflake, channel_id: ChannelIdField) -> bool:
        """Connect to, or move to, a voice channel."""
        ...

    @abstractmethod
    async def disconnect(self, guild_id: DiscordSnowflake) -> bool:
        """Disconnect from voice in a guild."""
        ...

    @abstractmethod
    def is_connected(self, guild_id: DiscordSnowflake) -> bool:
        ...

    @abstractmethod
    async def open(
        self,
        guild_id: DiscordSnowflake,
        track: "Track",
        filters: "FilterChain",
        volume: int,
        start_offset: float = 0.0,
    ) -> StreamHandle:
        """Start streaming ``track``, replacing any stream already open.

        Raises:
            StreamOpenFailedError: If the stream could not be started.
        """
        ...

    @abstractmethod
    async def close(self, guild_id: DiscordSnowflake) -> None:
        """Stop the current stream. Its end event still fires and is expected to be stale."""
        ...

    @abstractmethod
    async def pause(self, guild_id: DiscordSnowflake) -> bool:
        ...

    @abstractmethod
    async def resume(self, guild_id: DiscordSnowflake) -> bool:
        ...

    @abstractmethod
    async def set_volume(self, guild_id: DiscordSnowflake, volume: int) -> bool:
        """Apply ``volume``/100 to the live stream without restarting it."""
        ...

    @abstractmethod
    def set_event_handlers(self, on_stream_end: StreamEndHandler, on_disconnect: DisconnectHandler) -> None:
        """Register the engine's completion and disconnect callbacks."""
        ...
