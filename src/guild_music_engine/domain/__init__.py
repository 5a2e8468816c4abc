# ruff: noqa: N999
"""
Domain Layer

Contains pure engine logic:
- shared/: Cross-cutting exceptions, constrained types, messages, and events
- music/: Tracks, the guild queue aggregate, filters, and playlists
"""

from guild_music_engine.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
