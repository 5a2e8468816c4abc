"""Core domain entities for the music bounded context."""

from __future__ import annotations

import random
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from guild_music_engine.domain.music.filters import FilterChain
from guild_music_engine.domain.music.value_objects import LoopMode, PlaybackState, TrackId
from guild_music_engine.domain.shared.constants import LimitConstants
from guild_music_engine.domain.shared.datetime_utils import utcnow
from guild_music_engine.domain.shared.exceptions import InvalidOperationError
from guild_music_engine.domain.shared.types import (
    DiscordSnowflake,
    DurationSeconds,
    HistoryDepth,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeFloat,
    NonNegativeInt,
    TrackTitleStr,
    UtcDatetimeField,
    VolumeLevel,
)


def _format_seconds(total: int) -> str:
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


class Track(BaseModel):
    """Immutable value object representing a playable track."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: TrackId
    title: TrackTitleStr
    url: HttpUrlStr
    author: NonEmptyStr | None = None
    duration_seconds: DurationSeconds | None = None
    thumbnail_url: HttpUrlStr | None = None

    # Transient media URL, never persisted
    stream_url: HttpUrlStr | None = None

    # Request metadata (set when queued)
    requested_by_id: DiscordSnowflake | None = None
    requested_by_name: NonEmptyStr | None = None
    added_at: UtcDatetimeField | None = None

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        if self.duration_seconds is None:
            return "Unknown"
        return _format_seconds(self.duration_seconds)

    @property
    def display_title(self) -> str:
        if self.duration_seconds:
            return f"{self.title} [{self.duration_formatted}]"
        return self.title

    def with_requester(
        self, user_id: DiscordSnowflake, user_name: NonEmptyStr, added_at: datetime | None = None
    ) -> Track:
        """Return a copy of this track with requester metadata populated."""
        return self.model_copy(
            update={
                "requested_by_id": user_id,
                "requested_by_name": user_name,
                "added_at": added_at or utcnow(),
            }
        )

    def without_stream(self) -> Track:
        if self.stream_url is None:
            return self
        return self.model_copy(update={"stream_url": None})


class TrackCandidate(BaseModel):
    """A lightweight search hit offered as an autocomplete choice."""

    model_config = ConfigDict(frozen=True, strict=True)

    title: TrackTitleStr
    url: HttpUrlStr
    author: NonEmptyStr | None = None
    duration_seconds: DurationSeconds | None = None

    @property
    def choice_name(self) -> str:
        name = f"{self.title} - {self.author}" if self.author else self.title
        limit = LimitConstants.MAX_CHOICE_NAME_LENGTH
        return name if len(name) <= limit else name[: limit - 3] + "..."


class QueueSnapshot(BaseModel):
    """Read-only view of a guild queue handed to callers."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    tracks: tuple[Track, ...] = ()
    state: PlaybackState = PlaybackState.IDLE
    loop_mode: LoopMode = LoopMode.OFF
    volume: VolumeLevel = LimitConstants.DEFAULT_VOLUME
    filters: tuple[str, ...] = ()
    elapsed_seconds: NonNegativeFloat = 0.0
    history_size: NonNegativeInt = 0

    @classmethod
    def idle(cls, guild_id: int, volume: int = LimitConstants.DEFAULT_VOLUME) -> QueueSnapshot:
        return cls(guild_id=guild_id, volume=volume)

    @property
    def current_track(self) -> Track | None:
        if self.state.is_active and self.tracks:
            return self.tracks[0]
        return None

    @property
    def upcoming(self) -> tuple[Track, ...]:
        return self.tracks[1:] if self.current_track is not None else self.tracks

    @property
    def total_duration_seconds(self) -> int:
        return sum(t.duration_seconds or 0 for t in self.tracks)

    @property
    def elapsed_formatted(self) -> str:
        return _format_seconds(int(self.elapsed_seconds))

    def __len__(self) -> int:
        return len(self.tracks)


class GuildQueue(BaseModel):
    """Aggregate holding one guild's tracks, settings, and playback state.

    ``tracks[0]`` is the current track whenever the state is playing or
    paused. Only the owning controller mutates an instance.
    """

    model_config = ConfigDict(strict=True)

    guild_id: DiscordSnowflake
    tracks: list[Track] = Field(default_factory=list)
    loop_mode: LoopMode = LoopMode.OFF
    volume: VolumeLevel = LimitConstants.DEFAULT_VOLUME
    filters: FilterChain = Field(default_factory=FilterChain)
    state: PlaybackState = PlaybackState.IDLE
    history: list[Track] = Field(default_factory=list)
    history_depth: HistoryDepth = LimitConstants.DEFAULT_HISTORY_DEPTH
    last_activity: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def has_current(self) -> bool:
        return bool(self.tracks) and (self.state.is_active or self.state == PlaybackState.CONNECTING)

    @property
    def current_track(self) -> Track | None:
        return self.tracks[0] if self.tracks and self.state.is_active else None

    @property
    def upcoming_count(self) -> int:
        return len(self.tracks) - 1 if self.has_current else len(self.tracks)

    def touch(self) -> None:
        """Update last activity timestamp."""
        self.last_activity = utcnow()

    def idle_seconds(self, now: datetime | None = None) -> float:
        return ((now or utcnow()) - self.last_activity).total_seconds()

    def transition_to(self, new_state: PlaybackState) -> None:
        """Transition to a new playback state."""
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Cannot transition from {self.state.value} to {new_state.value}",
            )

        self.state = new_state
        self.touch()

    def enqueue(self, tracks: list[Track], *, to_front: bool = False) -> int:
        """Insert a batch preserving its order and return the index of its first track.

        With ``to_front`` the batch goes right after the current track, or to
        index 0 when nothing is current.
        """
        if to_front:
            position = 1 if self.has_current else 0
        else:
            position = len(self.tracks)
        self.tracks[position:position] = tracks
        self.touch()
        return position

    def pop_head(self) -> Track | None:
        if not self.tracks:
            return None
        track = self.tracks.pop(0)
        self.touch()
        return track

    def take_leading(self, count: int) -> list[Track]:
        """Remove and return up to ``count`` tracks from the front."""
        taken = self.tracks[:count]
        del self.tracks[:count]
        self.touch()
        return taken

    def push_front(self, track: Track) -> None:
        self.tracks.insert(0, track)
        self.touch()

    def clear_tracks(self) -> int:
        count = len(self.tracks)
        self.tracks.clear()
        self.touch()
        return count

    def record_history(self, track: Track) -> None:
        """Append to history, dropping the oldest entries past the bound."""
        self.history.append(track.without_stream())
        overflow = len(self.history) - self.history_depth
        if overflow > 0:
            del self.history[:overflow]

    def pop_history(self) -> Track | None:
        return self.history.pop() if self.history else None

    def set_volume(self, level: int) -> int:
        self.volume = max(LimitConstants.MIN_VOLUME, min(LimitConstants.MAX_VOLUME, level))
        self.touch()
        return self.volume

    def set_loop_mode(self, mode: LoopMode) -> None:
        self.loop_mode = mode
        self.touch()

    def set_filters(self, chain: FilterChain) -> None:
        self.filters = chain
        self.touch()

    def shuffle_upcoming(self, rng: random.Random | None = None) -> int:
        """Shuffle every track after the current one and return how many moved."""
        start = 1 if self.has_current else 0
        upcoming = self.tracks[start:]
        (rng or random).shuffle(upcoming)
        self.tracks[start:] = upcoming
        self.touch()
        return len(upcoming)

    def snapshot(self, elapsed_seconds: float = 0.0) -> QueueSnapshot:
        return QueueSnapshot(
            guild_id=self.guild_id,
            tracks=tuple(t.without_stream() for t in self.tracks),
            state=self.state,
            loop_mode=self.loop_mode,
            volume=self.volume,
            filters=self.filters.names,
            elapsed_seconds=max(0.0, float(elapsed_seconds)),
            history_size=len(self.history),
        )
