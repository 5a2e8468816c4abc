"""Discord voice transport implementing AudioTransport over FFmpeg."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import TYPE_CHECKING

import discord

from guild_music_engine.application.interfaces.audio_transport import (
    AudioTransport,
    DisconnectHandler,
    StreamEndHandler,
    StreamHandle,
)
from guild_music_engine.config.settings import AudioSettings
from guild_music_engine.domain.shared.constants import AudioConstants
from guild_music_engine.domain.shared.exceptions import ResolutionFailedError, StreamOpenFailedError
from guild_music_engine.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from discord.ext import commands

    from ....domain.music.entities import Track
    from ....domain.music.filters import FilterChain
    from ...audio.ytdlp_resolver import YtDlpResolver

logger = logging.getLogger(__name__)


def build_ffmpeg_options(settings: AudioSettings, filters: FilterChain, start_offset: float = 0.0) -> tuple[str, str]:
    """Return ``(before_options, options)`` for ``FFmpegPCMAudio``.

    Seeking goes in front of the input so FFmpeg skips instead of decoding
    up to the offset. The filter pipeline is a single ``-af`` argument.
    """
    # User-Agent must match yt-dlp's Android client to prevent YouTube 403
    before = f'{settings.ffmpeg_before_options} -headers "User-Agent: {AudioConstants.ANDROID_USER_AGENT}"'
    if start_offset > 0:
        before = f"{before} -ss {start_offset:.2f}"

    options = settings.ffmpeg_options
    expression = filters.ffmpeg_expression
    if expression:
        options = f'{options} -af "{expression}"'

    return before.strip(), options.strip()


class DiscordAudioTransport(AudioTransport):
    def __init__(
        self,
        bot: commands.Bot,
        settings: AudioSettings | None = None,
        *,
        resolver: YtDlpResolver | None = None,
    ) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()
        self._resolver = resolver
        self._stream_ids = itertools.count(1)
        self._current: dict[int, int] = {}
        self._leaving: set[int] = set()
        self._on_stream_end: StreamEndHandler | None = None
        self._on_disconnect: DisconnectHandler | None = None

        bot.add_listener(self._on_voice_state_update, "on_voice_state_update")

    def set_event_handlers(self, on_stream_end: StreamEndHandler, on_disconnect: DisconnectHandler) -> None:
        self._on_stream_end = on_stream_end
        self._on_disconnect = on_disconnect

    def _get_voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    def current_stream_id(self, guild_id: int) -> int | None:
        return self._current.get(guild_id)

    # ── Connection ───────────────────────────────────────────────────

    async def connect(self, guild_id: int, channel_id: int) -> bool:
        """Connect if not connected, move if in a different channel."""
        guild = self._bot.get_guild(guild_id)
        if not guild:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            return False

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            return False

        self._leaving.discard(guild_id)
        vc = self._get_voice_client(guild_id)
        if vc and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild_id)
            await self.disconnect(guild_id)
            vc = None

        try:
            async with asyncio.timeout(AudioConstants.CONNECT_TIMEOUT_SECONDS):
                if vc is None:
                    await channel.connect(self_deaf=True)
                    logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
                elif vc.channel is None or vc.channel.id != channel_id:
                    await vc.move_to(channel)
                    logger.info(LogTemplates.VOICE_MOVED, channel.name)
            await self._ensure_self_deaf(guild, channel)
            return True
        except TimeoutError:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            return False
        except discord.Forbidden:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            return False
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False

    async def _ensure_self_deaf(
        self,
        guild: discord.Guild,
        channel: discord.VoiceChannel | discord.StageChannel,
    ) -> None:
        try:
            await guild.change_voice_state(channel=channel, self_deaf=True)
        except discord.DiscordException as exc:
            logger.debug(LogTemplates.VOICE_SELF_DEAFEN_FAILED, guild.id, exc)

    async def disconnect(self, guild_id: int) -> bool:
        self._current.pop(guild_id, None)
        vc = self._get_voice_client(guild_id)
        if not vc:
            return True

        self._leaving.add(guild_id)
        try:
            await vc.disconnect(force=True)
        except discord.DiscordException:
            logger.exception("Failed to disconnect from voice")
            return False
        logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
        return True

    def is_connected(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        return vc is not None and vc.is_connected()

    async def _on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        """Report the bot being kicked or dropped from voice."""
        bot_user = self._bot.user
        if bot_user is None or member.id != bot_user.id:
            return
        if before.channel is None or after.channel is not None:
            return

        guild_id = member.guild.id
        self._current.pop(guild_id, None)
        if guild_id in self._leaving:
            self._leaving.discard(guild_id)
            return

        logger.info(LogTemplates.VOICE_LINK_LOST, guild_id)
        if self._on_disconnect is None:
            return
        try:
            await self._on_disconnect(guild_id)
        except Exception as e:
            logger.exception(LogTemplates.STREAM_CALLBACK_ERROR, guild_id, e)

    # ── Streams ──────────────────────────────────────────────────────

    async def open(
        self,
        guild_id: int,
        track: Track,
        filters: FilterChain,
        volume: int,
        start_offset: float = 0.0,
    ) -> StreamHandle:
        vc = self._get_voice_client(guild_id)
        if vc is None or not vc.is_connected():
            raise StreamOpenFailedError(track.title, ErrorMessages.VOICE_NOT_CONNECTED.format(guild_id=guild_id))

        if track.stream_url is None:
            track = await self._refresh(track)

        if vc.is_playing() or vc.is_paused():
            self._current.pop(guild_id, None)
            vc.stop()

        before_options, options = build_ffmpeg_options(self._settings, filters, start_offset)
        stream_id = next(self._stream_ids)
        try:
            source = discord.FFmpegPCMAudio(track.stream_url, before_options=before_options, options=options)
            vc.play(discord.PCMVolumeTransformer(source, volume=volume / 100), after=self._after(guild_id, stream_id))
        except discord.ClientException as e:
            raise StreamOpenFailedError(track.title, str(e)) from e

        self._current[guild_id] = stream_id
        logger.info(LogTemplates.STREAM_OPENED, stream_id, track.title, guild_id, start_offset, filters.names)
        return StreamHandle(guild_id=guild_id, stream_id=stream_id)

    async def _refresh(self, track: Track) -> Track:
        if self._resolver is None:
            raise StreamOpenFailedError(track.title, ErrorMessages.NO_STREAM_URL.format(title=track.title))
        try:
            return await self._resolver.refresh_stream(track)
        except ResolutionFailedError as e:
            raise StreamOpenFailedError(track.title, e.message) from e

    def _after(self, guild_id: int, stream_id: int):
        """Build the FFmpeg ``after`` callback. It runs on the player thread."""

        def after_callback(error: Exception | None = None) -> None:
            asyncio.run_coroutine_threadsafe(
                self._handle_stream_end(guild_id, stream_id, error),
                self._bot.loop,
            )

        return after_callback

    async def _handle_stream_end(self, guild_id: int, stream_id: int, error: Exception | None) -> None:
        logger.debug(LogTemplates.STREAM_ENDED, stream_id, guild_id, error)
        if self._current.get(guild_id) == stream_id:
            del self._current[guild_id]

        if self._on_stream_end is None:
            logger.warning(LogTemplates.STREAM_NO_HANDLER, guild_id)
            return
        try:
            await self._on_stream_end(guild_id, stream_id, error)
        except Exception as e:
            logger.exception(LogTemplates.STREAM_CALLBACK_ERROR, guild_id, e)

    async def close(self, guild_id: int) -> None:
        stream_id = self._current.pop(guild_id, None)
        vc = self._get_voice_client(guild_id)
        if vc and (vc.is_playing() or vc.is_paused()):
            vc.stop()
            logger.debug(LogTemplates.STREAM_CLOSED, stream_id, guild_id)

    async def pause(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        if vc and vc.is_playing():
            vc.pause()
            return True
        return False

    async def resume(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        if vc and vc.is_paused():
            vc.resume()
            return True
        return False

    async def set_volume(self, guild_id: int, volume: int) -> bool:
        vc = self._get_voice_client(guild_id)
        if vc and isinstance(vc.source, discord.PCMVolumeTransformer):
            vc.source.volume = max(0, min(100, volume)) / 100
            return True
        return False
