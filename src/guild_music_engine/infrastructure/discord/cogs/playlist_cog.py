"""Per-user saved playlists."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from guild_music_engine.application.services.music_engine import PlayContext
from guild_music_engine.application.services.rate_limiter import RateLimitAction
from guild_music_engine.application.services.results import ControlStatus, PlaylistResult
from guild_music_engine.domain.shared.constants import LimitConstants
from guild_music_engine.domain.shared.messages import DiscordUIMessages, ErrorMessages
from guild_music_engine.infrastructure.discord.cogs.music_cog import MusicCog, status_message
from guild_music_engine.infrastructure.discord.embeds import playlists_embed
from guild_music_engine.infrastructure.discord.guards.voice_guards import (
    display_name,
    require_voice_channel,
    send_ephemeral,
)

if TYPE_CHECKING:
    from ....application.services.music_engine import MusicEngine
    from ....config.container import Container

logger = logging.getLogger(__name__)

PlaylistName = app_commands.Range[str, 1, LimitConstants.MAX_CHOICE_NAME_LENGTH]


def playlist_failure(result: PlaylistResult, name: str) -> str:
    if result.status is ControlStatus.DUPLICATE_NAME:
        return DiscordUIMessages.PLAYLIST_DUPLICATE.format(name=name)
    if result.status is ControlStatus.NOT_FOUND:
        return DiscordUIMessages.PLAYLIST_NOT_FOUND.format(name=name)
    if result.status is ControlStatus.INVALID_NAME:
        return DiscordUIMessages.PLAYLIST_INVALID_NAME.format(max_length=LimitConstants.MAX_PLAYLIST_NAME_LENGTH)
    return status_message(result.status)


class PlaylistCog(commands.Cog):
    playlist = app_commands.Group(name="playlist", description="Save and load your playlists", guild_only=True)

    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @property
    def engine(self) -> MusicEngine:
        return self.container.music_engine

    async def _check_rate(self, interaction: discord.Interaction) -> bool:
        result = await self.engine.allow(interaction.user.id, RateLimitAction.PLAYLIST)
        if result:
            return True
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_RATE_LIMITED.format(retry_after=result.value))
        return False

    async def _name_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        playlists = await self.engine.playlist_choices(interaction.user.id, current)
        return [
            app_commands.Choice(name=p.name[: LimitConstants.MAX_CHOICE_NAME_LENGTH], value=p.name)
            for p in playlists
        ]

    @playlist.command(name="create", description="Create an empty playlist")
    @app_commands.describe(name="Playlist name")
    async def create_playlist(self, interaction: discord.Interaction, name: PlaylistName) -> None:
        if not await self._check_rate(interaction):
            return

        result = await self.engine.create_playlist(interaction.user.id, name)
        if not result:
            await send_ephemeral(interaction, playlist_failure(result, name))
            return
        await send_ephemeral(interaction, DiscordUIMessages.PLAYLIST_CREATED.format(name=name))

    @playlist.command(name="save", description="Save the current queue as a playlist")
    @app_commands.describe(name="Playlist name")
    async def save_queue(self, interaction: discord.Interaction, name: PlaylistName) -> None:
        if not await self._check_rate(interaction):
            return
        assert interaction.guild is not None

        result = await self.engine.save_from_queue(interaction.guild.id, interaction.user.id, name)
        if not result:
            await send_ephemeral(interaction, playlist_failure(result, name))
            return
        await send_ephemeral(
            interaction, DiscordUIMessages.PLAYLIST_SAVED.format(count=len(result.tracks), name=name)
        )

    @playlist.command(name="play", description="Queue every track of a saved playlist")
    @app_commands.describe(name="Playlist name", shuffle="Shuffle the playlist before queueing")
    @app_commands.autocomplete(name=_name_autocomplete)
    async def play_playlist(self, interaction: discord.Interaction, name: str, shuffle: bool = False) -> None:
        channel_id = await require_voice_channel(interaction)
        if channel_id is None or not await self._check_rate(interaction):
            return
        assert interaction.guild is not None

        await interaction.response.defer()
        music = self.bot.get_cog("MusicCog")
        if isinstance(music, MusicCog):
            music.remember_channel(interaction)

        context = PlayContext(
            guild_id=interaction.guild.id,
            user_id=interaction.user.id,
            user_name=display_name(interaction.user),
            voice_channel_id=channel_id,
        )
        result = await self.engine.load_into(context, name, shuffle=shuffle)
        if result:
            await interaction.followup.send(
                DiscordUIMessages.PLAYLIST_LOADED.format(count=len(result.added), name=name)
            )
        elif result.status is ControlStatus.QUEUE_EMPTY:
            await interaction.followup.send(DiscordUIMessages.PLAYLIST_EMPTY, ephemeral=True)
        elif result.status is ControlStatus.NOT_FOUND:
            await interaction.followup.send(DiscordUIMessages.PLAYLIST_NOT_FOUND.format(name=name), ephemeral=True)
        else:
            await interaction.followup.send(status_message(result.status), ephemeral=True)

    @playlist.command(name="list", description="List your playlists")
    async def list_playlists(self, interaction: discord.Interaction) -> None:
        if not await self._check_rate(interaction):
            return

        playlists = await self.engine.list_playlists(interaction.user.id)
        await interaction.response.send_message(embed=playlists_embed(playlists), ephemeral=True)

    @playlist.command(name="delete", description="Delete one of your playlists")
    @app_commands.describe(name="Playlist name")
    @app_commands.autocomplete(name=_name_autocomplete)
    async def delete_playlist(self, interaction: discord.Interaction, name: str) -> None:
        if not await self._check_rate(interaction):
            return

        result = await self.engine.delete_playlist(interaction.user.id, name)
        if not result:
            await send_ephemeral(interaction, playlist_failure(result, name))
            return
        await send_ephemeral(interaction, DiscordUIMessages.PLAYLIST_DELETED.format(name=name))


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(PlaylistCog(bot, container))
