"""Embed builders shared by the music and playlist cogs."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import discord

from guild_music_engine.domain.shared.constants import LimitConstants
from guild_music_engine.domain.shared.datetime_utils import UtcDateTime
from guild_music_engine.domain.shared.messages import DiscordUIMessages
from guild_music_engine.utils.reply import format_duration, page_bounds, progress_bar, truncate

if TYPE_CHECKING:
    from ...domain.music.entities import QueueSnapshot, Track, TrackCandidate
    from ...domain.music.playlist import Playlist


def format_requester(track: Track) -> str:
    if track.requested_by_id:
        return f"<@{track.requested_by_id}>"
    if track.requested_by_name:
        return track.requested_by_name
    return "Unknown"


def now_playing_embed(snapshot: QueueSnapshot) -> discord.Embed:
    track = snapshot.current_track
    if track is None:
        return discord.Embed(
            title=DiscordUIMessages.EMBED_NOW_PLAYING,
            description=DiscordUIMessages.STATE_NOTHING_PLAYING,
            color=discord.Color.red(),
        )

    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_NOW_PLAYING,
        description=f"[{track.title}]({track.url})\n{progress_bar(snapshot.elapsed_seconds, track.duration_seconds)}",
        color=discord.Color.green(),
    )
    if track.thumbnail_url:
        embed.set_thumbnail(url=track.thumbnail_url)

    if track.author:
        embed.add_field(name="👤 Artist", value=truncate(track.author, 64), inline=True)
    embed.add_field(name="⏱️ Duration", value=format_duration(track.duration_seconds), inline=True)
    embed.add_field(name="🔊 Volume", value=f"{snapshot.volume}%", inline=True)
    embed.add_field(
        name="🔄 Loop", value=f"{snapshot.loop_mode.emoji} {snapshot.loop_mode.value}", inline=True
    )
    embed.add_field(name="📋 Queue", value=f"{len(snapshot.upcoming)} up next", inline=True)
    if snapshot.filters:
        embed.add_field(name="🎛️ Filters", value=", ".join(snapshot.filters), inline=True)

    embed.set_footer(text=f"Requested by {track.requested_by_name or 'Unknown'}")
    return embed


def queue_embed(snapshot: QueueSnapshot, page: int = 1) -> discord.Embed:
    upcoming = snapshot.upcoming
    per_page = LimitConstants.QUEUE_PAGE_SIZE
    page, total_pages, start = page_bounds(len(upcoming), page, per_page)

    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_QUEUE.format(
            total_tracks=len(snapshot.tracks), page=page, total_pages=total_pages
        ),
        color=discord.Color.blurple(),
    )

    current = snapshot.current_track
    if current is not None:
        embed.add_field(
            name="🎵 Now Playing",
            value=f"**{truncate(current.title)}**\nDuration: {format_duration(current.duration_seconds)}",
            inline=False,
        )

    for idx, track in enumerate(upcoming[start : start + per_page], start=start + 1):
        embed.add_field(
            name=f"{idx}. {truncate(track.title)}",
            value=f"{format_duration(track.duration_seconds)} · Requested by: {track.requested_by_name or 'Unknown'}",
            inline=False,
        )

    if snapshot.total_duration_seconds:
        embed.set_footer(text=f"Total duration: {format_duration(snapshot.total_duration_seconds)}")
    return embed


def search_embed(query: str, candidates: Sequence[TrackCandidate]) -> discord.Embed:
    lines = [
        f"**{i}.** [{truncate(c.title, 80)}]({c.url}) · {format_duration(c.duration_seconds)}"
        for i, c in enumerate(candidates, start=1)
    ]
    return discord.Embed(
        title=DiscordUIMessages.EMBED_SEARCH_RESULTS.format(query=truncate(query, 200)),
        description="\n".join(lines),
        color=discord.Color.blurple(),
    )


def playlists_embed(playlists: Sequence[Playlist]) -> discord.Embed:
    lines = [
        DiscordUIMessages.PLAYLIST_LIST_ENTRY.format(
            name=truncate(p.name, 60),
            count=p.track_count,
            created=UtcDateTime(p.created_at).discord_timestamp("d"),
        )
        for p in playlists
    ]
    return discord.Embed(
        title=DiscordUIMessages.EMBED_PLAYLISTS,
        description="\n".join(lines) or DiscordUIMessages.PLAYLIST_NONE,
        color=discord.Color.blurple(),
    )
