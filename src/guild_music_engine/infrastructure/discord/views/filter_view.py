"""Filter picker: a toggle select plus clear and preset buttons."""

from __future__ import annotations

import discord

from guild_music_engine.domain.music.filters import AudioFilter, FilterChain, FilterPreset
from guild_music_engine.infrastructure.discord.controls import ControlAction, custom_id_for
from guild_music_engine.infrastructure.discord.views.base_view import BaseInteractiveView

FILTER_LABELS: dict[AudioFilter, str] = {
    AudioFilter.BASSBOOST: "Bass Boost",
    AudioFilter.NIGHTCORE: "Nightcore",
    AudioFilter.VAPORWAVE: "Vaporwave",
    AudioFilter.EIGHT_D: "8D Audio",
    AudioFilter.KARAOKE: "Karaoke",
    AudioFilter.TREMOLO: "Tremolo",
    AudioFilter.VIBRATO: "Vibrato",
    AudioFilter.REVERSE: "Reverse",
}

PRESET_LABELS: dict[FilterPreset, str] = {
    FilterPreset.PARTY: "🎉 Party",
    FilterPreset.CHILL: "😌 Chill",
    FilterPreset.GAMING: "🎮 Gaming",
}


class FilterPanelView(BaseInteractiveView):
    def __init__(self, active: FilterChain, *, timeout: float | None = 180.0) -> None:
        super().__init__(timeout=timeout)

        options = [
            discord.SelectOption(
                label=FILTER_LABELS[f],
                value=f.value,
                description="Active, select to disable" if f in active else None,
                emoji="✅" if f in active else None,
            )
            for f in AudioFilter
        ]
        self.add_item(
            discord.ui.Select(
                custom_id=custom_id_for(ControlAction.FILTER_SELECT),
                placeholder="Toggle a filter",
                options=options,
                min_values=1,
                max_values=1,
                row=0,
            )
        )

        self.add_item(
            discord.ui.Button(
                style=discord.ButtonStyle.danger,
                label="Clear",
                custom_id=custom_id_for(ControlAction.FILTER_CLEAR),
                row=1,
                disabled=not active,
            )
        )
        for preset, label in PRESET_LABELS.items():
            self.add_item(
                discord.ui.Button(
                    style=discord.ButtonStyle.primary,
                    label=label,
                    custom_id=custom_id_for(ControlAction.FILTER_PRESET, preset.value),
                    row=1,
                )
            )
