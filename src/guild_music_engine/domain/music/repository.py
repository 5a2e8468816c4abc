"""
Music Domain Repository Interfaces

Abstract base classes defining the contracts for data persistence.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from guild_music_engine.domain.music.playlist import Playlist


class PlaylistRepository(ABC):
    """Abstract repository for user-owned playlists.

    Names are unique per owner under case-insensitive comparison.
    """

    @abstractmethod
    async def add(self, playlist: Playlist) -> bool:
        """Store a new playlist.

        Args:
            playlist: The playlist to store.

        Returns:
            False if the owner already has a playlist with the same name key.
        """
        ...

    @abstractmethod
    async def get(self, playlist_id: str) -> Playlist | None:
        """Retrieve a playlist by id.

        Returns:
            The playlist if found, None otherwise.
        """
        ...

    @abstractmethod
    async def get_by_name(self, owner_id: int, name: str) -> Playlist | None:
        """Retrieve an owner's playlist by case-insensitive name."""
        ...

    @abstractmethod
    async def delete(self, owner_id: int, name: str) -> bool:
        """Delete an owner's playlist by case-insensitive name.

        Returns:
            True if a playlist was deleted.
        """
        ...

    @abstractmethod
    async def list_for_owner(self, owner_id: int) -> list[Playlist]:
        """Get every playlist an owner has, oldest first."""
        ...
