"""Periodic eviction of guilds that have been idle too long."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel

from guild_music_engine.domain.shared.messages import LogTemplates
from guild_music_engine.domain.shared.types import NonNegativeInt

if TYPE_CHECKING:
    from ...config.settings import EngineSettings
    from .registry import GuildQueueRegistry

logger = logging.getLogger(__name__)


class IdleSweepJob:
    def __init__(self, *, registry: GuildQueueRegistry, settings: EngineSettings) -> None:
        self._registry = registry
        self._settings = settings
        self._running = False
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        if self._running:
            logger.warning(LogTemplates.SWEEP_ALREADY_RUNNING)
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(LogTemplates.SWEEP_STARTED)

    async def stop(self) -> None:
        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(LogTemplates.SWEEP_STOPPED)

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._settings.idle_sweep_interval_seconds)
            except asyncio.CancelledError:
                break

            try:
                await self.run_sweep()
            except Exception:
                logger.exception("Error during idle sweep")

    async def run_sweep(self) -> SweepStats:
        stats = SweepStats()
        controllers = self._registry.controllers()
        logger.debug(LogTemplates.SWEEP_CYCLE_RUNNING, len(controllers))

        timeout = self._settings.idle_timeout_seconds
        for controller in controllers:
            stats.checked += 1
            if not controller.is_idle_for(timeout):
                continue
            try:
                if await controller.shutdown_if_idle(timeout):
                    stats.evicted += 1
            except Exception as e:
                stats.failed += 1
                logger.error(LogTemplates.SWEEP_GUILD_FAILED, controller.guild_id, e)

        if stats.evicted > 0:
            logger.info(LogTemplates.SWEEP_COMPLETED, stats.evicted)

        return stats

    @property
    def is_running(self) -> bool:
        return self._running


class SweepStats(BaseModel):
    checked: NonNegativeInt = 0
    evicted: NonNegativeInt = 0
    failed: NonNegativeInt = 0
