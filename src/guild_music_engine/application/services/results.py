"""Typed outcomes returned by engine operations.

Expected user-facing conditions (nothing playing, empty queue, duplicate
playlist name, ...) come back as a status rather than an exception. Every
result is truthy on success.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ...domain.music.entities import QueueSnapshot, Track
from ...domain.music.playlist import Playlist


class ControlStatus(Enum):
    """Status codes shared by control, play, and playlist results."""

    OK = "ok"
    ALREADY = "already"
    NOT_PLAYING = "not_playing"
    QUEUE_EMPTY = "queue_empty"
    NO_HISTORY = "no_history"
    NOT_ENOUGH_TRACKS = "not_enough_tracks"
    DUPLICATE_NAME = "duplicate_name"
    NOT_FOUND = "not_found"
    RESOLUTION_FAILED = "resolution_failed"
    CANCELLED = "cancelled"
    RATE_LIMITED = "rate_limited"
    CONNECT_FAILED = "connect_failed"
    RETIRED = "retired"
    INVALID_NAME = "invalid_name"

    @property
    def is_success(self) -> bool:
        return self in (ControlStatus.OK, ControlStatus.ALREADY)


@dataclass(frozen=True)
class ControlResult:
    """Result of a single controller operation."""

    status: ControlStatus
    snapshot: QueueSnapshot | None = None
    value: Any = None

    def __bool__(self) -> bool:
        return self.status.is_success

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    @classmethod
    def ok(cls, snapshot: QueueSnapshot | None = None, value: Any = None) -> ControlResult:
        return cls(status=ControlStatus.OK, snapshot=snapshot, value=value)

    @classmethod
    def fail(cls, status: ControlStatus, snapshot: QueueSnapshot | None = None) -> ControlResult:
        return cls(status=status, snapshot=snapshot)


@dataclass(frozen=True)
class PlayResult:
    """Result of a play request: what was added and where."""

    status: ControlStatus
    snapshot: QueueSnapshot | None = None
    added: tuple[Track, ...] = ()
    position: int = 0
    started: bool = False

    def __bool__(self) -> bool:
        return self.status.is_success

    @property
    def first_track(self) -> Track | None:
        return self.added[0] if self.added else None

    @classmethod
    def ok(
        cls, snapshot: QueueSnapshot, added: tuple[Track, ...], position: int, started: bool
    ) -> PlayResult:
        return cls(
            status=ControlStatus.OK,
            snapshot=snapshot,
            added=added,
            position=position,
            started=started,
        )

    @classmethod
    def fail(cls, status: ControlStatus, snapshot: QueueSnapshot | None = None) -> PlayResult:
        return cls(status=status, snapshot=snapshot)


@dataclass(frozen=True)
class PlaylistResult:
    """Result of a playlist store operation."""

    status: ControlStatus
    playlist: Playlist | None = None
    tracks: tuple[Track, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return self.status.is_success

    @classmethod
    def ok(cls, playlist: Playlist, tracks: tuple[Track, ...] = ()) -> PlaylistResult:
        return cls(status=ControlStatus.OK, playlist=playlist, tracks=tracks)

    @classmethod
    def fail(cls, status: ControlStatus, playlist: Playlist | None = None) -> PlaylistResult:
        return cls(status=status, playlist=playlist)
