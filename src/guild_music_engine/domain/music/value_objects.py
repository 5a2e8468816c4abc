"""Immutable value objects for the music bounded context."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from enum import Enum

from guild_music_engine.domain.shared.messages import ErrorMessages

_YOUTUBE_ID_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/shorts/([a-zA-Z0-9_-]{11})"),
)


@dataclass(frozen=True)
class TrackId:
    """Typically a YouTube video ID or a hash of the URL."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError(ErrorMessages.EMPTY_TRACK_ID)

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)

    @classmethod
    def from_url(cls, url: str) -> TrackId:
        """Extract track ID from a URL, using YouTube video ID or a URL hash as fallback."""
        for pattern in _YOUTUBE_ID_PATTERNS:
            match = pattern.search(url)
            if match:
                return cls(match.group(1))

        return cls(hashlib.sha256(url.encode()).hexdigest()[:16])


class PlaybackState(Enum):
    """Playback state with enforced transitions.

    State transitions:
    - IDLE -> CONNECTING (first track enqueued)
    - CONNECTING -> PLAYING (stream opened)
    - CONNECTING -> STOPPED (nothing playable, stop, or voice failure)
    - PLAYING <-> PAUSED
    - PLAYING/PAUSED -> CONNECTING (skip, advance, previous, stream reapply)
    - PLAYING/PAUSED -> STOPPED (stop, queue exhausted, disconnect)
    - STOPPED -> CONNECTING (new request before eviction)
    - STOPPED -> IDLE (reset)
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            PlaybackState.IDLE: {PlaybackState.CONNECTING, PlaybackState.STOPPED},
            PlaybackState.CONNECTING: {
                PlaybackState.CONNECTING,
                PlaybackState.PLAYING,
                PlaybackState.STOPPED,
            },
            PlaybackState.PLAYING: {
                PlaybackState.PAUSED,
                PlaybackState.CONNECTING,
                PlaybackState.STOPPED,
            },
            PlaybackState.PAUSED: {
                PlaybackState.PLAYING,
                PlaybackState.CONNECTING,
                PlaybackState.STOPPED,
            },
            PlaybackState.STOPPED: {PlaybackState.IDLE, PlaybackState.CONNECTING},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {PlaybackState.PLAYING, PlaybackState.PAUSED}

    @property
    def is_playing(self) -> bool:
        return self == PlaybackState.PLAYING

    @property
    def needs_start(self) -> bool:
        """True when an enqueue should kick off playback."""
        return self in {PlaybackState.IDLE, PlaybackState.STOPPED}


class StopReason(Enum):
    """Reasons playback can be stopped."""

    USER_REQUEST = "user_request"
    NO_MORE_TRACKS = "no_more_tracks"
    DISCONNECT = "disconnect"
    INACTIVITY = "inactivity"


class LoopMode(Enum):
    """Loop mode settings for queue playback."""

    OFF = "off"
    TRACK = "track"  # Loop current track
    QUEUE = "queue"  # Loop entire queue

    def next_mode(self) -> LoopMode:
        """Cycle to next loop mode."""
        modes = list(LoopMode)
        current_index = modes.index(self)
        next_index = (current_index + 1) % len(modes)
        return modes[next_index]

    @property
    def emoji(self) -> str:
        return {LoopMode.OFF: "➡️", LoopMode.TRACK: "🔂", LoopMode.QUEUE: "🔁"}[self]
