"""Discord UI views and components."""

from __future__ import annotations

from guild_music_engine.infrastructure.discord.views.base_view import BaseInteractiveView
from guild_music_engine.infrastructure.discord.views.control_panel import ControlPanelView
from guild_music_engine.infrastructure.discord.views.filter_view import FilterPanelView
from guild_music_engine.infrastructure.discord.views.search_view import SearchResultsView

__all__ = [
    "BaseInteractiveView",
    "ControlPanelView",
    "FilterPanelView",
    "SearchResultsView",
]
