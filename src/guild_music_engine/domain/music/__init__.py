"""
Music Bounded Context

Domain logic for tracks, the per-guild queue, audio filters, and playlists.
"""

from guild_music_engine.domain.music.entities import (
    GuildQueue,
    QueueSnapshot,
    Track,
    TrackCandidate,
)
from guild_music_engine.domain.music.filters import AudioFilter, FilterChain, FilterPreset
from guild_music_engine.domain.music.playlist import Playlist
from guild_music_engine.domain.music.repository import PlaylistRepository
from guild_music_engine.domain.music.value_objects import LoopMode, PlaybackState, StopReason, TrackId

__all__ = [
    # Entities
    "Track",
    "TrackCandidate",
    "GuildQueue",
    "QueueSnapshot",
    "Playlist",
    # Value Objects
    "TrackId",
    "PlaybackState",
    "LoopMode",
    "StopReason",
    "AudioFilter",
    "FilterPreset",
    "FilterChain",
    # Repository
    "PlaylistRepository",
]
