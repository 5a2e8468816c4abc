"""Tests for the voice guards and cog setup() functions."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from guild_music_engine.domain.shared.messages import DiscordUIMessages, ErrorMessages
from guild_music_engine.infrastructure.discord.guards.voice_guards import (
    display_name,
    get_member,
    require_voice_channel,
    send_ephemeral,
)


def _make_interaction(
    *,
    user_is_member: bool = True,
    in_voice: bool = True,
    user_channel_id: int = 100,
    in_guild: bool = True,
) -> MagicMock:
    interaction = MagicMock(spec=discord.Interaction)
    interaction.response = MagicMock()
    interaction.response.is_done.return_value = False
    interaction.response.send_message = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    interaction.guild = MagicMock() if in_guild else None

    if user_is_member:
        user = MagicMock(spec=discord.Member)
        if in_voice:
            user.voice = MagicMock()
            user.voice.channel = MagicMock()
            user.voice.channel.id = user_channel_id
        else:
            user.voice = None
    else:
        user = MagicMock(spec=discord.User)

    interaction.user = user
    return interaction


@pytest.mark.asyncio
async def test_send_ephemeral_fresh_interaction():
    interaction = _make_interaction()

    await send_ephemeral(interaction, "hello")

    interaction.response.send_message.assert_awaited_once_with("hello", ephemeral=True)


@pytest.mark.asyncio
async def test_send_ephemeral_after_defer_uses_followup():
    interaction = _make_interaction()
    interaction.response.is_done.return_value = True

    await send_ephemeral(interaction, "hello")

    interaction.followup.send.assert_awaited_once_with("hello", ephemeral=True)
    interaction.response.send_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_direct_message_rejected():
    interaction = _make_interaction(in_guild=False)

    assert await get_member(interaction) is None
    interaction.response.send_message.assert_awaited_once_with(DiscordUIMessages.STATE_SERVER_ONLY, ephemeral=True)


@pytest.mark.asyncio
async def test_user_not_member_rejects():
    interaction = _make_interaction(user_is_member=False)

    assert await require_voice_channel(interaction) is None
    interaction.response.send_message.assert_awaited_once_with(
        DiscordUIMessages.STATE_VERIFY_VOICE_FAILED, ephemeral=True
    )


@pytest.mark.asyncio
async def test_user_not_in_voice_rejects():
    interaction = _make_interaction(in_voice=False)

    assert await require_voice_channel(interaction) is None
    interaction.response.send_message.assert_awaited_once_with(
        DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE, ephemeral=True
    )


@pytest.mark.asyncio
async def test_user_in_voice_returns_channel():
    interaction = _make_interaction(user_channel_id=321)

    assert await require_voice_channel(interaction) == 321
    interaction.response.send_message.assert_not_awaited()


def test_display_name_prefers_nickname():
    member = MagicMock(spec=discord.Member)
    member.display_name = "Nick"
    member.name = "account"

    assert display_name(member) == "Nick"


def test_display_name_falls_back_to_username():
    user = MagicMock()
    user.display_name = ""
    user.name = "account"

    assert display_name(user) == "account"


# ── Cog setup() without a container ──────────────────────────────────


@pytest.mark.asyncio
async def test_music_cog_setup_no_container():
    from guild_music_engine.infrastructure.discord.cogs.music_cog import setup

    bot = MagicMock(spec=["add_cog"])
    with pytest.raises(RuntimeError, match=ErrorMessages.CONTAINER_NOT_FOUND):
        await setup(bot)


@pytest.mark.asyncio
async def test_playlist_cog_setup_no_container():
    from guild_music_engine.infrastructure.discord.cogs.playlist_cog import setup

    bot = MagicMock(spec=["add_cog"])
    with pytest.raises(RuntimeError, match=ErrorMessages.CONTAINER_NOT_FOUND):
        await setup(bot)


@pytest.mark.asyncio
async def test_playlist_cog_setup_adds_cog():
    from guild_music_engine.infrastructure.discord.cogs.playlist_cog import PlaylistCog, setup

    bot = MagicMock()
    bot.add_cog = AsyncMock()

    await setup(bot)

    assert isinstance(bot.add_cog.call_args.args[0], PlaylistCog)
