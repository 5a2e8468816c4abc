"""User-owned playlists, independent of any live guild queue."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from guild_music_engine.domain.music.entities import Track
from guild_music_engine.domain.shared.constants import LimitConstants
from guild_music_engine.domain.shared.datetime_utils import UtcDateTime, utcnow
from guild_music_engine.domain.shared.types import (
    DiscordSnowflake,
    NonEmptyStr,
    PlaylistNameStr,
    UtcDatetimeField,
)


def playlist_name_key(name: str) -> str:
    """Comparison key for playlist names, unique per owner."""
    return name.strip().casefold()


def is_valid_playlist_name(name: str) -> bool:
    return 0 < len(name.strip()) <= LimitConstants.MAX_PLAYLIST_NAME_LENGTH


class Playlist(BaseModel):
    """A named, ordered list of track snapshots owned by one user."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: NonEmptyStr
    owner_id: DiscordSnowflake
    name: PlaylistNameStr
    tracks: tuple[Track, ...] = ()
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    is_public: bool = False

    @classmethod
    def new(
        cls,
        owner_id: int,
        name: str,
        tracks: tuple[Track, ...] | list[Track] = (),
        created_at: datetime | None = None,
    ) -> Playlist:
        """Create a playlist with an ``{owner}_{unix_millis}`` id and stream-free copies."""
        created = created_at or utcnow()
        return cls(
            id=f"{owner_id}_{UtcDateTime(created).unix_millis}",
            owner_id=owner_id,
            name=name.strip(),
            tracks=tuple(t.without_stream() for t in tracks),
            created_at=created,
        )

    @property
    def name_key(self) -> str:
        return playlist_name_key(self.name)

    @property
    def track_count(self) -> int:
        return len(self.tracks)

    def matches(self, partial: str) -> bool:
        return playlist_name_key(partial) in self.name_key
