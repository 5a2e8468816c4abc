"""Base class for component views routed by ``custom_id``."""

from __future__ import annotations

import logging

import discord

logger = logging.getLogger(__name__)


class BaseInteractiveView(discord.ui.View):
    """View whose items carry routable ``custom_id``s and no callbacks of their own.

    The music cog's interaction listener handles every click, so these views
    only describe layout. Expiry disables the components on the tracked message.
    """

    def __init__(self, *, timeout: float | None = 180.0) -> None:
        super().__init__(timeout=timeout)
        self._message: discord.Message | None = None

    def set_message(self, message: discord.Message) -> None:
        self._message = message

    def _disable_items(self) -> None:
        for item in self.children:
            if isinstance(item, discord.ui.Button | discord.ui.Select):
                item.disabled = True

    async def on_timeout(self) -> None:
        self._disable_items()
        if self._message is None:
            return
        try:
            await self._message.edit(view=self)
        except discord.HTTPException:
            logger.debug("Failed disabling expired view on message %s", self._message.id)
