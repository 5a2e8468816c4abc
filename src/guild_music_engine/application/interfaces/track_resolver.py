"""Port interface for turning user queries into playable tracks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from guild_music_engine.domain.shared.types import NonEmptyStr, PositiveInt

if TYPE_CHECKING:
    from ...domain.music.entities import Track, TrackCandidate


class TrackResolver(ABC):
    """Interface for resolving URLs, playlists and search terms to tracks."""

    @abstractmethod
    async def resolve(self, query: NonEmptyStr, limit: PositiveInt = 50) -> list["Track"]:
        """Resolve a query to one or more tracks, in playback order.

        A playlist URL yields up to ``limit`` entries. Anything else yields
        a single track.

        Raises:
            ResolutionFailedError: If nothing playable was found.
        """
        ...

    @abstractmethod
    async def search_candidates(self, partial: NonEmptyStr, limit: PositiveInt = 10) -> list["TrackCandidate"]:
        """Return lightweight search hits for autocomplete. Never raises for no results."""
        ...
