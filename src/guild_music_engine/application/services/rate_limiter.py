"""Sliding-window rate limiter shared by command cooldowns and autocomplete."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import defaultdict, deque
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import RateLimitRule, RateLimitSettings

logger = logging.getLogger(__name__)


class RateLimitAction(Enum):
    SEARCH = "search"
    PLAY = "play"
    CONTROL = "control"
    PLAYLIST = "playlist"


class RateLimiter:
    """Sliding-window limiter keyed by ``(subject_id, action)``."""

    def __init__(self, settings: RateLimitSettings, clock: Callable[[], float] = time.monotonic) -> None:
        self._settings = settings
        self._clock = clock
        self._history: dict[tuple[int, RateLimitAction], deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()

    def rule_for(self, action: RateLimitAction) -> RateLimitRule:
        return getattr(self._settings, action.value)

    async def allow(self, subject_id: int, action: RateLimitAction) -> tuple[bool, float]:
        """Return whether ``action`` may proceed for ``subject_id`` and the retry delay if not."""
        rule = self.rule_for(action)
        now = self._clock()
        key = (subject_id, action)
        async with self._lock:
            history = self._history[key]
            while history and now - history[0] >= rule.window_seconds:
                history.popleft()
            if len(history) >= rule.limit:
                retry_after = max(0.0, rule.window_seconds - (now - history[0]))
                logger.debug(LogTemplates.SEARCH_RATE_LIMITED, action.value, subject_id, retry_after)
                return False, retry_after
            history.append(now)
        return True, 0.0

    def reset(self, subject_id: int | None = None) -> None:
        if subject_id is None:
            self._history.clear()
            return
        for key in [k for k in self._history if k[0] == subject_id]:
            del self._history[key]
