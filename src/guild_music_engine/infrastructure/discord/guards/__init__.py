"""Voice channel guard functions for Discord cogs."""

from guild_music_engine.infrastructure.discord.guards.voice_guards import (
    display_name,
    get_member,
    require_voice_channel,
    send_ephemeral,
)

__all__ = [
    "display_name",
    "get_member",
    "require_voice_channel",
    "send_ephemeral",
]
