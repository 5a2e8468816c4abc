"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite playlist repository)
- Discord (bot, cogs, voice transport, views)
- Audio (yt-dlp track resolution)
"""

from guild_music_engine.infrastructure.discord.adapters.voice_transport import DiscordAudioTransport
from guild_music_engine.infrastructure.discord.bot import create_bot
from guild_music_engine.infrastructure.persistence.database import Database

__all__ = [
    "create_bot",
    "DiscordAudioTransport",
    "Database",
]
