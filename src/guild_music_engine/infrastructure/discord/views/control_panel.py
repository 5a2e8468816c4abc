"""Playback control buttons shown under now-playing messages."""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from guild_music_engine.domain.music.value_objects import PlaybackState
from guild_music_engine.infrastructure.discord.controls import ControlAction, custom_id_for
from guild_music_engine.infrastructure.discord.views.base_view import BaseInteractiveView

if TYPE_CHECKING:
    from ....domain.music.entities import QueueSnapshot


class ControlPanelView(BaseInteractiveView):
    """Two rows: transport buttons, then queue and volume buttons."""

    def __init__(self, snapshot: QueueSnapshot, *, timeout: float | None = None) -> None:
        super().__init__(timeout=timeout)
        paused = snapshot.state == PlaybackState.PAUSED
        idle = snapshot.current_track is None

        self._button(ControlAction.PREVIOUS, "⏮️", row=0, disabled=snapshot.history_size == 0)
        if paused:
            self._button(ControlAction.RESUME, "▶️", row=0, style=discord.ButtonStyle.success)
        else:
            self._button(ControlAction.PAUSE, "⏸️", row=0, disabled=idle)
        self._button(ControlAction.SKIP, "⏭️", row=0, disabled=idle)
        self._button(ControlAction.STOP, "⏹️", row=0, style=discord.ButtonStyle.danger)
        self._button(ControlAction.QUEUE, "📋", row=0)

        self._button(ControlAction.SHUFFLE, "🔀", row=1, disabled=len(snapshot.upcoming) < 2)
        self._button(ControlAction.LOOP, snapshot.loop_mode.emoji, row=1)
        self._button(ControlAction.VOLUME_DOWN, "🔉", row=1, disabled=snapshot.volume <= 0)
        self._button(ControlAction.VOLUME_UP, "🔊", row=1, disabled=snapshot.volume >= 100)

    def _button(
        self,
        action: ControlAction,
        emoji: str,
        *,
        row: int,
        style: discord.ButtonStyle = discord.ButtonStyle.secondary,
        disabled: bool = False,
    ) -> None:
        self.add_item(
            discord.ui.Button(
                style=style,
                emoji=emoji,
                custom_id=custom_id_for(action),
                row=row,
                disabled=disabled,
            )
        )
