"""Slash-command music cog delegating to the music engine."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Literal

import discord
from discord import app_commands
from discord.ext import commands

from guild_music_engine.application.services.music_engine import PlayContext
from guild_music_engine.application.services.rate_limiter import RateLimitAction
from guild_music_engine.application.services.results import ControlResult, ControlStatus, PlayResult
from guild_music_engine.domain.music.filters import AudioFilter, FilterChain, FilterPreset
from guild_music_engine.domain.music.value_objects import LoopMode
from guild_music_engine.domain.shared.constants import LimitConstants
from guild_music_engine.domain.shared.events import GuildEvicted, PlaybackFailed, TrackStarted
from guild_music_engine.domain.shared.exceptions import ValidationError
from guild_music_engine.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from guild_music_engine.infrastructure.discord.controls import ControlAction, ControlDispatcher
from guild_music_engine.infrastructure.discord.embeds import (
    now_playing_embed,
    queue_embed,
    search_embed,
)
from guild_music_engine.infrastructure.discord.guards.voice_guards import (
    display_name,
    require_voice_channel,
    send_ephemeral,
)
from guild_music_engine.infrastructure.discord.views.control_panel import ControlPanelView
from guild_music_engine.infrastructure.discord.views.filter_view import FilterPanelView
from guild_music_engine.infrastructure.discord.views.search_view import SearchResultsView
from guild_music_engine.utils.reply import format_duration, parse_timestamp, truncate

if TYPE_CHECKING:
    from ....application.services.music_engine import MusicEngine
    from ....config.container import Container
    from ....domain.music.entities import QueueSnapshot

logger = logging.getLogger(__name__)

_STATUS_MESSAGES: dict[ControlStatus, str] = {
    ControlStatus.NOT_PLAYING: DiscordUIMessages.STATE_NOTHING_PLAYING,
    ControlStatus.QUEUE_EMPTY: DiscordUIMessages.STATE_QUEUE_EMPTY,
    ControlStatus.NO_HISTORY: DiscordUIMessages.STATE_NO_HISTORY,
    ControlStatus.NOT_ENOUGH_TRACKS: DiscordUIMessages.STATE_NOT_ENOUGH_TRACKS_TO_SHUFFLE,
    ControlStatus.RESOLUTION_FAILED: DiscordUIMessages.PLAY_NO_RESULTS,
    ControlStatus.CANCELLED: DiscordUIMessages.PLAY_CANCELLED,
    ControlStatus.CONNECT_FAILED: DiscordUIMessages.ERROR_COULD_NOT_JOIN_VOICE,
}


def status_message(status: ControlStatus) -> str:
    return _STATUS_MESSAGES.get(status, DiscordUIMessages.ERROR_COMMAND_FAILED_SEE_LOGS)


def filter_chain_of(snapshot: QueueSnapshot) -> FilterChain:
    return FilterChain(filters=tuple(AudioFilter.parse(name) for name in snapshot.filters))


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

        # guild -> text channel where playback was last requested
        self._text_channels: dict[int, int] = {}
        # guilds whose next start is announced by the /play reply instead
        self._reply_announces: set[int] = set()

        self._dispatcher = ControlDispatcher()
        self._register_controls()

    @property
    def engine(self) -> MusicEngine:
        return self.container.music_engine

    async def cog_load(self) -> None:
        self._dispatcher.validate()
        bus = self.container.event_bus
        bus.subscribe(TrackStarted, self._on_track_started)
        bus.subscribe(PlaybackFailed, self._on_playback_failed)
        bus.subscribe(GuildEvicted, self._on_guild_evicted)

    async def cog_unload(self) -> None:
        bus = self.container.event_bus
        bus.unsubscribe(TrackStarted, self._on_track_started)
        bus.unsubscribe(PlaybackFailed, self._on_playback_failed)
        bus.unsubscribe(GuildEvicted, self._on_guild_evicted)
        self._text_channels.clear()

    # ── Helpers ──────────────────────────────────────────────────────

    async def _check_rate(self, interaction: discord.Interaction, action: RateLimitAction) -> bool:
        result = await self.engine.allow(interaction.user.id, action)
        if result:
            return True
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_RATE_LIMITED.format(retry_after=result.value))
        return False

    async def _guard(self, interaction: discord.Interaction, action: RateLimitAction) -> int | None:
        """Voice presence plus cooldown. Returns the caller's voice channel id."""
        channel_id = await require_voice_channel(interaction)
        if channel_id is None:
            return None
        if not await self._check_rate(interaction, action):
            return None
        return channel_id

    def remember_channel(self, interaction: discord.Interaction) -> None:
        if interaction.guild is not None and interaction.channel_id is not None:
            self._text_channels[interaction.guild.id] = interaction.channel_id

    def _context(self, interaction: discord.Interaction, channel_id: int) -> PlayContext:
        assert interaction.guild is not None
        return PlayContext(
            guild_id=interaction.guild.id,
            user_id=interaction.user.id,
            user_name=display_name(interaction.user),
            voice_channel_id=channel_id,
        )

    async def _reply_control(
        self,
        interaction: discord.Interaction,
        result: ControlResult,
        success: str,
        *,
        already: str | None = None,
    ) -> None:
        if result.status is ControlStatus.ALREADY and already is not None:
            await send_ephemeral(interaction, already)
        elif result:
            await send_ephemeral(interaction, success)
        else:
            await send_ephemeral(interaction, status_message(result.status))

    def _play_reply(self, result: PlayResult) -> str:
        if not result:
            return status_message(result.status)
        if len(result.added) > 1:
            return DiscordUIMessages.PLAY_ADDED_MANY.format(count=len(result.added))
        track = result.first_track
        assert track is not None
        if result.started:
            return DiscordUIMessages.PLAY_NOW_PLAYING.format(
                title=truncate(track.title, 80), duration=format_duration(track.duration_seconds)
            )
        return DiscordUIMessages.PLAY_ADDED_ONE.format(title=truncate(track.title, 80), position=result.position)

    # ── Event notifications ──────────────────────────────────────────

    async def _notify(self, guild_id: int, content: str) -> None:
        channel_id = self._text_channels.get(guild_id)
        if channel_id is None:
            return
        channel = self.bot.get_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            return
        try:
            await channel.send(content)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.NOTIFY_FAILED, channel_id, e)

    async def _on_track_started(self, event: TrackStarted) -> None:
        # Restarts for seeks and filter changes carry an offset and are not announced
        if event.start_offset > 0 or event.guild_id in self._reply_announces:
            return
        await self._notify(
            event.guild_id,
            DiscordUIMessages.PLAY_NOW_PLAYING.format(
                title=truncate(event.track_title, 80), duration=format_duration(event.duration_seconds)
            ),
        )

    async def _on_playback_failed(self, event: PlaybackFailed) -> None:
        await self._notify(
            event.guild_id, DiscordUIMessages.PLAY_FAILED_NOTICE.format(title=truncate(event.track_title, 80))
        )

    async def _on_guild_evicted(self, event: GuildEvicted) -> None:
        self._text_channels.pop(event.guild_id, None)

    # ── Slash commands ───────────────────────────────────────────────

    @app_commands.command(name="play", description="Play a song by URL, playlist URL or search query.")
    @app_commands.describe(
        query="Song name, YouTube URL, Spotify track URL or playlist URL",
        shuffle="Shuffle the tracks of a playlist before queueing",
        top="Queue right after the current track",
    )
    async def play(
        self,
        interaction: discord.Interaction,
        query: str,
        shuffle: bool = False,
        top: bool = False,
    ) -> None:
        channel_id = await self._guard(interaction, RateLimitAction.PLAY)
        if channel_id is None:
            return

        # Defer early because resolution and voice connection can exceed the 3-second deadline
        await interaction.response.defer()
        self.remember_channel(interaction)

        assert interaction.guild is not None
        guild_id = interaction.guild.id
        announces = self.engine.get_queue(guild_id).state.needs_start
        if announces:
            self._reply_announces.add(guild_id)
        try:
            result = await self.engine.play(
                self._context(interaction, channel_id), query, shuffle=shuffle, add_to_top=top
            )
        finally:
            if announces:
                self._reply_announces.discard(guild_id)

        if not result:
            await interaction.followup.send(self._play_reply(result), ephemeral=True)
            return

        snapshot = result.snapshot or self.engine.get_queue(interaction.guild.id)
        if result.started:
            await interaction.followup.send(
                self._play_reply(result), embed=now_playing_embed(snapshot), view=ControlPanelView(snapshot)
            )
        else:
            await interaction.followup.send(self._play_reply(result))

    @play.autocomplete("query")
    async def play_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        candidates = await self.engine.search_songs(
            interaction.user.id, current, self.container.settings.search.autocomplete_limit
        )
        return [
            app_commands.Choice(name=c.choice_name, value=c.url)
            for c in candidates
            if len(c.url) <= LimitConstants.MAX_CHOICE_NAME_LENGTH
        ]

    @app_commands.command(name="queue", description="Show the current queue.")
    @app_commands.describe(page="Page number")
    async def queue(self, interaction: discord.Interaction, page: app_commands.Range[int, 1] = 1) -> None:
        if interaction.guild is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
            return

        snapshot = self.engine.get_queue(interaction.guild.id)
        if not snapshot.tracks:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_QUEUE_EMPTY)
            return

        await interaction.response.send_message(embed=queue_embed(snapshot, page), ephemeral=True)

    @app_commands.command(name="nowplaying", description="Show the current track.")
    async def nowplaying(self, interaction: discord.Interaction) -> None:
        if interaction.guild is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
            return

        snapshot = self.engine.get_queue(interaction.guild.id)
        if snapshot.current_track is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOTHING_PLAYING)
            return

        await interaction.response.send_message(
            embed=now_playing_embed(snapshot), view=ControlPanelView(snapshot)
        )

    @app_commands.command(name="skip", description="Skip one or more tracks.")
    @app_commands.describe(amount="How many tracks to skip")
    async def skip(
        self,
        interaction: discord.Interaction,
        amount: app_commands.Range[int, LimitConstants.MIN_SKIP_AMOUNT, LimitConstants.MAX_SKIP_AMOUNT] = 1,
    ) -> None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return
        assert interaction.guild is not None

        result = await self.engine.skip(interaction.guild.id, amount)
        await self._reply_control(
            interaction, result, DiscordUIMessages.ACTION_SKIPPED.format(count=result.value or 0)
        )

    @app_commands.command(name="previous", description="Play the previous track.")
    async def previous(self, interaction: discord.Interaction) -> None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return
        assert interaction.guild is not None

        result = await self.engine.previous(interaction.guild.id)
        await self._reply_control(interaction, result, DiscordUIMessages.ACTION_PREVIOUS)

    @app_commands.command(name="pause", description="Pause the current track.")
    async def pause(self, interaction: discord.Interaction) -> None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return
        assert interaction.guild is not None

        result = await self.engine.pause(interaction.guild.id)
        await self._reply_control(
            interaction, result, DiscordUIMessages.ACTION_PAUSED, already=DiscordUIMessages.STATE_ALREADY_PAUSED
        )

    @app_commands.command(name="resume", description="Resume paused playback.")
    async def resume(self, interaction: discord.Interaction) -> None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return
        assert interaction.guild is not None

        result = await self.engine.resume(interaction.guild.id)
        await self._reply_control(
            interaction, result, DiscordUIMessages.ACTION_RESUMED, already=DiscordUIMessages.STATE_ALREADY_PLAYING
        )

    @app_commands.command(name="stop", description="Stop playback and clear the queue.")
    async def stop(self, interaction: discord.Interaction) -> None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return
        assert interaction.guild is not None

        result = await self.engine.stop(interaction.guild.id)
        await self._reply_control(interaction, result, DiscordUIMessages.ACTION_STOPPED)

    @app_commands.command(name="shuffle", description="Shuffle the upcoming tracks.")
    async def shuffle(self, interaction: discord.Interaction) -> None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return
        assert interaction.guild is not None

        result = await self.engine.shuffle(interaction.guild.id)
        await self._reply_control(interaction, result, DiscordUIMessages.ACTION_SHUFFLED)

    @app_commands.command(name="loop", description="Set or cycle the loop mode.")
    @app_commands.describe(mode="Loop mode; omit to cycle off → track → queue")
    async def loop(
        self,
        interaction: discord.Interaction,
        mode: Literal["off", "track", "queue"] | None = None,
    ) -> None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return
        assert interaction.guild is not None

        if mode is None:
            new_mode = await self.engine.cycle_loop(interaction.guild.id)
        else:
            result = await self.engine.set_loop(interaction.guild.id, LoopMode(mode))
            if not result:
                await send_ephemeral(interaction, status_message(result.status))
                return
            new_mode = result.value

        await send_ephemeral(
            interaction, DiscordUIMessages.ACTION_LOOP_MODE_SET.format(mode=f"{new_mode.emoji} {new_mode.value}")
        )

    @app_commands.command(name="volume", description="Set the playback volume.")
    @app_commands.describe(level="Volume from 0 to 100")
    async def volume(
        self,
        interaction: discord.Interaction,
        level: app_commands.Range[int, LimitConstants.MIN_VOLUME, LimitConstants.MAX_VOLUME],
    ) -> None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return
        assert interaction.guild is not None

        applied = await self.engine.set_volume(interaction.guild.id, level)
        await send_ephemeral(interaction, DiscordUIMessages.ACTION_VOLUME_SET.format(volume=applied))

    @app_commands.command(name="filters", description="Toggle audio filters or apply a preset.")
    @app_commands.describe(
        filter="Filter to toggle",
        preset="Preset that replaces the active filters",
        clear="Remove every active filter",
    )
    @app_commands.choices(
        filter=[app_commands.Choice(name=f.value, value=f.value) for f in AudioFilter],
        preset=[app_commands.Choice(name=p.value, value=p.value) for p in FilterPreset],
    )
    async def filters(
        self,
        interaction: discord.Interaction,
        filter: str | None = None,
        preset: str | None = None,
        clear: bool = False,
    ) -> None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return
        assert interaction.guild is not None
        guild_id = interaction.guild.id

        if not (filter or preset or clear):
            snapshot = self.engine.get_queue(guild_id)
            await interaction.response.send_message(
                DiscordUIMessages.EMBED_FILTERS.format(filters=", ".join(snapshot.filters) or "none"),
                view=FilterPanelView(filter_chain_of(snapshot)),
                ephemeral=True,
            )
            return

        try:
            if clear:
                result = await self.engine.clear_filters(guild_id)
                message = DiscordUIMessages.ACTION_FILTERS_CLEARED
            elif preset:
                result = await self.engine.apply_preset(guild_id, preset)
                message = DiscordUIMessages.ACTION_PRESET_APPLIED.format(
                    name=preset, filters=", ".join(result.value.names) if result else ""
                )
            else:
                assert filter is not None
                result = await self.engine.toggle_filter(guild_id, filter)
                template = (
                    DiscordUIMessages.ACTION_FILTER_ON
                    if result and AudioFilter.parse(filter) in result.value
                    else DiscordUIMessages.ACTION_FILTER_OFF
                )
                message = template.format(name=filter)
        except ValidationError:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_INVALID_FILTER)
            return

        await self._reply_control(interaction, result, message)

    @app_commands.command(name="seek", description="Jump to a position in the current track.")
    @app_commands.describe(timestamp="Position like 90, 1:30 or 1:02:03")
    async def seek(self, interaction: discord.Interaction, timestamp: str) -> None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return
        assert interaction.guild is not None

        seconds = parse_timestamp(timestamp)
        if seconds is None:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_INVALID_TIMESTAMP)
            return

        result = await self.engine.seek(interaction.guild.id, seconds)
        await self._reply_control(
            interaction, result, DiscordUIMessages.ACTION_SEEKED.format(position=format_duration(result.value))
        )

    @app_commands.command(name="search", description="Search for songs and pick one to queue.")
    @app_commands.describe(query="What to search for")
    async def search(self, interaction: discord.Interaction, query: str) -> None:
        if await self._guard(interaction, RateLimitAction.SEARCH) is None:
            return

        await interaction.response.defer(ephemeral=True)
        self.remember_channel(interaction)

        candidates = await self.engine.search(query, LimitConstants.AUTOCOMPLETE_LIMIT)
        view = SearchResultsView(candidates)
        if not candidates or not view.has_options:
            await interaction.followup.send(DiscordUIMessages.PLAY_NO_RESULTS, ephemeral=True)
            return

        await interaction.followup.send(embed=search_embed(query, candidates), view=view, ephemeral=True)

    # ── Component interactions ───────────────────────────────────────

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction) -> None:
        if interaction.type is not discord.InteractionType.component:
            return
        data: dict[str, Any] = interaction.data or {}  # type: ignore[assignment]
        custom_id = data.get("custom_id")
        if isinstance(custom_id, str):
            await self._dispatcher.dispatch(interaction, custom_id)

    def _register_controls(self) -> None:
        register = self._dispatcher.register
        register(ControlAction.PREVIOUS, self._control_previous)
        register(ControlAction.PAUSE, self._control_pause)
        register(ControlAction.RESUME, self._control_resume)
        register(ControlAction.PLAY, self._control_resume)
        register(ControlAction.SKIP, self._control_skip)
        register(ControlAction.STOP, self._control_stop)
        register(ControlAction.SHUFFLE, self._control_shuffle)
        register(ControlAction.LOOP, self._control_loop)
        register(ControlAction.VOLUME_UP, self._control_volume_up)
        register(ControlAction.VOLUME_DOWN, self._control_volume_down)
        register(ControlAction.QUEUE, self._control_queue)
        register(ControlAction.FILTER_CLEAR, self._control_filter_clear)
        register(ControlAction.FILTER_PRESET, self._control_filter_preset)
        register(ControlAction.FILTER_SELECT, self._control_filter_select)
        register(ControlAction.SEARCH_SELECT, self._control_search_select)

    async def _control_guild(self, interaction: discord.Interaction) -> int | None:
        if await self._guard(interaction, RateLimitAction.CONTROL) is None:
            return None
        assert interaction.guild is not None
        return interaction.guild.id

    async def _refresh_panel(self, interaction: discord.Interaction, result: ControlResult) -> None:
        """Redraw the now-playing message, or explain why nothing changed."""
        if not result:
            await send_ephemeral(interaction, status_message(result.status))
            return
        assert interaction.guild is not None
        snapshot = result.snapshot or self.engine.get_queue(interaction.guild.id)
        await interaction.response.edit_message(embed=now_playing_embed(snapshot), view=ControlPanelView(snapshot))

    async def _refresh_filters(self, interaction: discord.Interaction, result: ControlResult) -> None:
        if not result:
            await send_ephemeral(interaction, status_message(result.status))
            return
        chain: FilterChain = result.value
        await interaction.response.edit_message(
            content=DiscordUIMessages.EMBED_FILTERS.format(filters=", ".join(chain.names) or "none"),
            view=FilterPanelView(chain),
        )

    async def _control_previous(self, interaction: discord.Interaction, _: str | None) -> None:
        if (guild_id := await self._control_guild(interaction)) is not None:
            await self._refresh_panel(interaction, await self.engine.previous(guild_id))

    async def _control_pause(self, interaction: discord.Interaction, _: str | None) -> None:
        if (guild_id := await self._control_guild(interaction)) is not None:
            await self._refresh_panel(interaction, await self.engine.pause(guild_id))

    async def _control_resume(self, interaction: discord.Interaction, _: str | None) -> None:
        if (guild_id := await self._control_guild(interaction)) is not None:
            await self._refresh_panel(interaction, await self.engine.resume(guild_id))

    async def _control_skip(self, interaction: discord.Interaction, _: str | None) -> None:
        if (guild_id := await self._control_guild(interaction)) is not None:
            await self._refresh_panel(interaction, await self.engine.skip(guild_id))

    async def _control_stop(self, interaction: discord.Interaction, _: str | None) -> None:
        if (guild_id := await self._control_guild(interaction)) is not None:
            await self._refresh_panel(interaction, await self.engine.stop(guild_id))

    async def _control_shuffle(self, interaction: discord.Interaction, _: str | None) -> None:
        if (guild_id := await self._control_guild(interaction)) is not None:
            await self._refresh_panel(interaction, await self.engine.shuffle(guild_id))

    async def _control_loop(self, interaction: discord.Interaction, _: str | None) -> None:
        if (guild_id := await self._control_guild(interaction)) is not None:
            await self.engine.cycle_loop(guild_id)
            await self._refresh_panel(interaction, ControlResult.ok(self.engine.get_queue(guild_id)))

    async def _step_volume(self, interaction: discord.Interaction, step: int) -> None:
        if (guild_id := await self._control_guild(interaction)) is None:
            return
        current = self.engine.get_queue(guild_id).volume
        await self.engine.set_volume(guild_id, current + step)
        await self._refresh_panel(interaction, ControlResult.ok(self.engine.get_queue(guild_id)))

    async def _control_volume_up(self, interaction: discord.Interaction, _: str | None) -> None:
        await self._step_volume(interaction, LimitConstants.VOLUME_STEP)

    async def _control_volume_down(self, interaction: discord.Interaction, _: str | None) -> None:
        await self._step_volume(interaction, -LimitConstants.VOLUME_STEP)

    async def _control_queue(self, interaction: discord.Interaction, _: str | None) -> None:
        if interaction.guild is None:
            return
        snapshot = self.engine.get_queue(interaction.guild.id)
        if not snapshot.tracks:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_QUEUE_EMPTY)
            return
        await interaction.response.send_message(embed=queue_embed(snapshot), ephemeral=True)

    async def _control_filter_clear(self, interaction: discord.Interaction, _: str | None) -> None:
        if (guild_id := await self._control_guild(interaction)) is not None:
            await self._refresh_filters(interaction, await self.engine.clear_filters(guild_id))

    async def _control_filter_preset(self, interaction: discord.Interaction, preset: str | None) -> None:
        if (guild_id := await self._control_guild(interaction)) is not None:
            await self._refresh_filters(interaction, await self.engine.apply_preset(guild_id, preset or ""))

    async def _control_filter_select(self, interaction: discord.Interaction, _: str | None) -> None:
        values = (interaction.data or {}).get("values") or []
        if not values:
            return
        if (guild_id := await self._control_guild(interaction)) is not None:
            await self._refresh_filters(interaction, await self.engine.toggle_filter(guild_id, values[0]))

    async def _control_search_select(self, interaction: discord.Interaction, _: str | None) -> None:
        values = (interaction.data or {}).get("values") or []
        if not values:
            return
        channel_id = await self._guard(interaction, RateLimitAction.PLAY)
        if channel_id is None:
            return

        await interaction.response.defer()
        self.remember_channel(interaction)
        result = await self.engine.play(self._context(interaction, channel_id), values[0])
        await interaction.edit_original_response(content=self._play_reply(result), embed=None, view=None)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))
