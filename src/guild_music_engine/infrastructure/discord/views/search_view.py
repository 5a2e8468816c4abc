"""Select menu listing search results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import discord

from guild_music_engine.domain.shared.constants import LimitConstants
from guild_music_engine.infrastructure.discord.controls import ControlAction, custom_id_for
from guild_music_engine.infrastructure.discord.views.base_view import BaseInteractiveView
from guild_music_engine.utils.reply import format_duration, truncate

if TYPE_CHECKING:
    from ....domain.music.entities import TrackCandidate


class SearchResultsView(BaseInteractiveView):
    def __init__(self, candidates: Sequence[TrackCandidate], *, timeout: float | None = 120.0) -> None:
        super().__init__(timeout=timeout)

        options = [
            discord.SelectOption(
                label=truncate(c.title, 100),
                value=c.url,
                description=truncate(
                    f"{c.author or 'Unknown'} · {format_duration(c.duration_seconds)}", 100
                ),
            )
            for c in candidates[: LimitConstants.MAX_SELECT_OPTIONS]
            if len(c.url) <= 100
        ]
        self.add_item(
            discord.ui.Select(
                custom_id=custom_id_for(ControlAction.SEARCH_SELECT),
                placeholder="Pick a track to queue",
                options=options,
            )
        )

    @property
    def has_options(self) -> bool:
        select = self.children[0]
        return isinstance(select, discord.ui.Select) and bool(select.options)
