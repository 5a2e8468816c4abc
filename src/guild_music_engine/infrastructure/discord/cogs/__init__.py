"""Discord cogs - command handlers."""

from guild_music_engine.infrastructure.discord.cogs.music_cog import MusicCog
from guild_music_engine.infrastructure.discord.cogs.playlist_cog import PlaylistCog

__all__ = [
    "MusicCog",
    "PlaylistCog",
]
