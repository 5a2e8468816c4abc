"""
Tests for DiscordAudioTransport and FFmpeg option building.

Voice clients are MagicMocks specced on discord.VoiceClient so the
transport's isinstance checks hold.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from guild_music_engine.config.settings import AudioSettings
from guild_music_engine.domain.music.filters import AudioFilter, FilterChain
from guild_music_engine.domain.shared.exceptions import ResolutionFailedError, StreamOpenFailedError
from guild_music_engine.infrastructure.discord.adapters.voice_transport import (
    DiscordAudioTransport,
    build_ffmpeg_options,
)

GUILD_ID = 4242
BOT_ID = 1


@pytest.fixture
def voice_client():
    vc = MagicMock(spec=discord.VoiceClient)
    vc.is_connected.return_value = True
    vc.is_playing.return_value = False
    vc.is_paused.return_value = False
    vc.disconnect = AsyncMock()
    return vc


@pytest.fixture
def bot(voice_client):
    bot = MagicMock()
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.voice_client = voice_client
    bot.get_guild.return_value = guild
    bot.user.id = BOT_ID
    return bot


@pytest.fixture
def transport(bot):
    return DiscordAudioTransport(bot, AudioSettings())


class TestBuildFfmpegOptions:
    def test_plain_stream(self):
        before, options = build_ffmpeg_options(AudioSettings(), FilterChain())

        assert before.startswith("-reconnect 1")
        assert "User-Agent:" in before
        assert "-ss" not in before
        assert options == "-vn"

    def test_seek_goes_before_input(self):
        before, _ = build_ffmpeg_options(AudioSettings(), FilterChain(), start_offset=75.5)

        assert before.endswith("-ss 75.50")

    def test_filters_become_one_af_argument(self):
        chain = FilterChain().toggled(AudioFilter.REVERSE).toggled(AudioFilter.BASSBOOST)

        _, options = build_ffmpeg_options(AudioSettings(), chain)

        assert options == '-vn -af "bass=g=20,dynaudnorm=f=200,areverse"'

    def test_custom_options_from_settings(self):
        settings = AudioSettings(ffmpeg_options="-vn -sn")

        _, options = build_ffmpeg_options(settings, FilterChain())

        assert options == "-vn -sn"


class TestOpen:
    @pytest.mark.asyncio
    async def test_not_connected_raises(self, transport, bot, sample_track):
        bot.get_guild.return_value.voice_client = None

        with pytest.raises(StreamOpenFailedError):
            await transport.open(GUILD_ID, sample_track, FilterChain(), 100)

    @pytest.mark.asyncio
    async def test_open_plays_source_with_volume(self, transport, voice_client, sample_track):
        with patch("discord.FFmpegPCMAudio") as ffmpeg, patch("discord.PCMVolumeTransformer") as volume:
            handle = await transport.open(GUILD_ID, sample_track, FilterChain(), 50, start_offset=12.0)

        assert handle.guild_id == GUILD_ID
        assert transport.current_stream_id(GUILD_ID) == handle.stream_id
        ffmpeg.assert_called_once()
        assert ffmpeg.call_args.args[0] == sample_track.stream_url
        assert "-ss 12.00" in ffmpeg.call_args.kwargs["before_options"]
        assert volume.call_args.kwargs["volume"] == 0.5
        voice_client.play.assert_called_once()

    @pytest.mark.asyncio
    async def test_each_open_gets_a_new_stream_id(self, transport, sample_track):
        with patch("discord.FFmpegPCMAudio"), patch("discord.PCMVolumeTransformer"):
            first = await transport.open(GUILD_ID, sample_track, FilterChain(), 100)
            second = await transport.open(GUILD_ID, sample_track, FilterChain(), 100)

        assert second.stream_id != first.stream_id

    @pytest.mark.asyncio
    async def test_open_stops_current_audio(self, transport, voice_client, sample_track):
        voice_client.is_playing.return_value = True

        with patch("discord.FFmpegPCMAudio"), patch("discord.PCMVolumeTransformer"):
            await transport.open(GUILD_ID, sample_track, FilterChain(), 100)

        voice_client.stop.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_stream_url_is_refreshed(self, bot, sample_track):
        resolver = MagicMock()
        resolver.refresh_stream = AsyncMock(return_value=sample_track)
        transport = DiscordAudioTransport(bot, AudioSettings(), resolver=resolver)

        with patch("discord.FFmpegPCMAudio") as ffmpeg, patch("discord.PCMVolumeTransformer"):
            await transport.open(GUILD_ID, sample_track.without_stream(), FilterChain(), 100)

        resolver.refresh_stream.assert_awaited_once()
        assert ffmpeg.call_args.args[0] == sample_track.stream_url

    @pytest.mark.asyncio
    async def test_refresh_failure_becomes_open_failure(self, bot, sample_track):
        resolver = MagicMock()
        resolver.refresh_stream = AsyncMock(side_effect=ResolutionFailedError("gone"))
        transport = DiscordAudioTransport(bot, AudioSettings(), resolver=resolver)

        with pytest.raises(StreamOpenFailedError):
            await transport.open(GUILD_ID, sample_track.without_stream(), FilterChain(), 100)

    @pytest.mark.asyncio
    async def test_client_exception_becomes_open_failure(self, transport, voice_client, sample_track):
        voice_client.play.side_effect = discord.ClientException("Already playing audio.")

        with patch("discord.FFmpegPCMAudio"), patch("discord.PCMVolumeTransformer"):
            with pytest.raises(StreamOpenFailedError):
                await transport.open(GUILD_ID, sample_track, FilterChain(), 100)


class TestStreamEvents:
    @pytest.mark.asyncio
    async def test_stream_end_forwarded_with_id(self, transport):
        on_end = AsyncMock()
        transport.set_event_handlers(on_end, AsyncMock())
        transport._current[GUILD_ID] = 7

        await transport._handle_stream_end(GUILD_ID, 7, None)

        on_end.assert_awaited_once_with(GUILD_ID, 7, None)
        assert transport.current_stream_id(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_old_stream_end_keeps_current(self, transport):
        on_end = AsyncMock()
        transport.set_event_handlers(on_end, AsyncMock())
        transport._current[GUILD_ID] = 8

        await transport._handle_stream_end(GUILD_ID, 7, None)

        assert transport.current_stream_id(GUILD_ID) == 8
        on_end.assert_awaited_once_with(GUILD_ID, 7, None)

    @pytest.mark.asyncio
    async def test_handler_error_is_logged(self, transport):
        transport.set_event_handlers(AsyncMock(side_effect=RuntimeError("boom")), AsyncMock())

        await transport._handle_stream_end(GUILD_ID, 1, None)

    def _voice_update(self, member_id: int, before_channel, after_channel):
        member = MagicMock()
        member.id = member_id
        member.guild.id = GUILD_ID
        before = MagicMock()
        before.channel = before_channel
        after = MagicMock()
        after.channel = after_channel
        return member, before, after

    @pytest.mark.asyncio
    async def test_kicked_bot_reports_disconnect(self, transport):
        on_disconnect = AsyncMock()
        transport.set_event_handlers(AsyncMock(), on_disconnect)

        await transport._on_voice_state_update(*self._voice_update(BOT_ID, MagicMock(), None))

        on_disconnect.assert_awaited_once_with(GUILD_ID)

    @pytest.mark.asyncio
    async def test_own_disconnect_not_reported(self, transport):
        on_disconnect = AsyncMock()
        transport.set_event_handlers(AsyncMock(), on_disconnect)

        await transport.disconnect(GUILD_ID)
        await transport._on_voice_state_update(*self._voice_update(BOT_ID, MagicMock(), None))

        on_disconnect.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_members_ignored(self, transport):
        on_disconnect = AsyncMock()
        transport.set_event_handlers(AsyncMock(), on_disconnect)

        await transport._on_voice_state_update(*self._voice_update(99, MagicMock(), None))

        on_disconnect.assert_not_awaited()


class TestControls:
    @pytest.mark.asyncio
    async def test_pause_only_when_playing(self, transport, voice_client):
        assert await transport.pause(GUILD_ID) is False

        voice_client.is_playing.return_value = True

        assert await transport.pause(GUILD_ID) is True
        voice_client.pause.assert_called_once()

    @pytest.mark.asyncio
    async def test_resume_only_when_paused(self, transport, voice_client):
        voice_client.is_paused.return_value = True

        assert await transport.resume(GUILD_ID) is True
        voice_client.resume.assert_called_once()

    @pytest.mark.asyncio
    async def test_set_volume_scales_in_place(self, transport, voice_client):
        voice_client.source = MagicMock(spec=discord.PCMVolumeTransformer)

        assert await transport.set_volume(GUILD_ID, 30) is True
        assert voice_client.source.volume == pytest.approx(0.3)

    @pytest.mark.asyncio
    async def test_close_stops_audio(self, transport, voice_client):
        voice_client.is_paused.return_value = True
        transport._current[GUILD_ID] = 3

        await transport.close(GUILD_ID)

        voice_client.stop.assert_called_once()
        assert transport.current_stream_id(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_connect_unknown_guild(self, transport, bot):
        bot.get_guild.return_value = None

        assert await transport.connect(GUILD_ID, 10) is False

    @pytest.mark.asyncio
    async def test_connect_rejects_text_channel(self, transport, bot):
        bot.get_guild.return_value.get_channel.return_value = MagicMock(spec=discord.TextChannel)

        assert await transport.connect(GUILD_ID, 10) is False

    def test_is_connected(self, transport, voice_client):
        assert transport.is_connected(GUILD_ID)

        voice_client.is_connected.return_value = False

        assert not transport.is_connected(GUILD_ID)
