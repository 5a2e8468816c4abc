"""Search Application Service - autocomplete and search-menu lookups."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...domain.shared.messages import LogTemplates
from .rate_limiter import RateLimitAction

if TYPE_CHECKING:
    from ...config.settings import SearchSettings
    from ...domain.music.entities import TrackCandidate
    from ..interfaces.track_resolver import TrackResolver
    from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class SearchService:
    """Bounded, rate-limited search that never takes a guild lock.

    Autocomplete must answer within Discord's interaction window, so every
    failure mode degrades to an empty list.
    """

    def __init__(self, *, resolver: TrackResolver, rate_limiter: RateLimiter, settings: SearchSettings) -> None:
        self._resolver = resolver
        self._rate_limiter = rate_limiter
        self._settings = settings

    async def search_songs(self, user_id: int, partial: str, limit: int | None = None) -> list[TrackCandidate]:
        query = (partial or "").strip()
        if len(query) < self._settings.min_query_length:
            return []

        allowed, _ = await self._rate_limiter.allow(user_id, RateLimitAction.SEARCH)
        if not allowed:
            return []

        count = min(limit or self._settings.autocomplete_limit, self._settings.autocomplete_limit)
        try:
            async with asyncio.timeout(self._settings.autocomplete_timeout_seconds):
                return await self._resolver.search_candidates(query, count)
        except TimeoutError:
            logger.warning(LogTemplates.SEARCH_TIMEOUT, query)
            return []
        except Exception as e:
            logger.error(LogTemplates.SEARCH_FAILED.format(query=query, error=e))
            return []

    async def search_menu(self, query: str, limit: int) -> list[TrackCandidate]:
        """Search for the ``/search`` select menu, without the autocomplete timeout."""
        text = (query or "").strip()
        if not text:
            return []
        return await self._resolver.search_candidates(text, limit)
