"""Process-wide mapping of guild id to its playback controller."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ...domain.music.value_objects import StopReason
from ...domain.shared.events import EventBus, GuildEvicted, get_event_bus
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from .playback_controller import EvictCallback, PlaybackController

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[int, "EvictCallback"], "PlaybackController"]


class GuildQueueRegistry:
    """Keyed store of controllers.

    The registry lock is held only while an entry is created or removed.
    Guild operations are serialized by each controller's own lock.
    """

    def __init__(self, factory: ControllerFactory, *, event_bus: EventBus | None = None) -> None:
        self._factory = factory
        self._event_bus = event_bus or get_event_bus()
        self._controllers: dict[int, PlaybackController] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._controllers)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._controllers

    def guild_ids(self) -> list[int]:
        return list(self._controllers)

    def controllers(self) -> list[PlaybackController]:
        return list(self._controllers.values())

    def get_if_exists(self, guild_id: int) -> PlaybackController | None:
        return self._controllers.get(guild_id)

    async def get_or_create(self, guild_id: int) -> PlaybackController:
        controller = self._controllers.get(guild_id)
        if controller is not None and not controller.is_retired:
            return controller

        async with self._lock:
            controller = self._controllers.get(guild_id)
            if controller is None or controller.is_retired:
                controller = self._factory(guild_id, self.remove)
                self._controllers[guild_id] = controller
                logger.debug(LogTemplates.REGISTRY_CREATED, guild_id)
            return controller

    async def remove(self, guild_id: int, controller: PlaybackController) -> bool:
        """Drop ``controller`` if it is still the entry for ``guild_id``."""
        async with self._lock:
            if self._controllers.get(guild_id) is not controller:
                return False
            del self._controllers[guild_id]

        logger.info(LogTemplates.REGISTRY_EVICTED, guild_id)
        await self._event_bus.publish(GuildEvicted(guild_id=guild_id))
        return True

    async def shutdown_all(self) -> None:
        for controller in self.controllers():
            try:
                await controller.shutdown(StopReason.USER_REQUEST)
            except Exception as e:
                logger.error(LogTemplates.REGISTRY_SHUTDOWN_FAILED, controller.guild_id, e)
