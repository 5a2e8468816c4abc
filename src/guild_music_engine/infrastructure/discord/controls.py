"""Typed routing for message component interactions.

Buttons and selects carry string ``custom_id``s. ``parse_custom_id`` turns
one into a ``ControlAction`` plus an optional argument, and
``ControlDispatcher`` maps each action to exactly one handler.

Id grammar::

    music_control_{previous,pause,resume,play,skip,stop,shuffle,loop,volume_up,volume_down,queue}
    music_filter_clear
    music_filter_preset_{party,chill,gaming}
    music_filter_select
    music_search_select
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

from guild_music_engine.domain.music.filters import FilterPreset
from guild_music_engine.domain.shared.exceptions import BusinessRuleViolationError, ValidationError
from guild_music_engine.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

CUSTOM_ID_PREFIX: Final[str] = "music_"
_CONTROL_PREFIX: Final[str] = "music_control_"
_PRESET_PREFIX: Final[str] = "music_filter_preset_"


class ControlAction(Enum):
    PREVIOUS = "previous"
    PAUSE = "pause"
    RESUME = "resume"
    PLAY = "play"
    SKIP = "skip"
    STOP = "stop"
    SHUFFLE = "shuffle"
    LOOP = "loop"
    VOLUME_UP = "volume_up"
    VOLUME_DOWN = "volume_down"
    QUEUE = "queue"
    FILTER_CLEAR = "filter_clear"
    FILTER_PRESET = "filter_preset"
    FILTER_SELECT = "filter_select"
    SEARCH_SELECT = "search_select"

    @property
    def is_playback_control(self) -> bool:
        return self in _PLAYBACK_CONTROLS


_PLAYBACK_CONTROLS: Final[frozenset[ControlAction]] = frozenset(
    {
        ControlAction.PREVIOUS,
        ControlAction.PAUSE,
        ControlAction.RESUME,
        ControlAction.PLAY,
        ControlAction.SKIP,
        ControlAction.STOP,
        ControlAction.SHUFFLE,
        ControlAction.LOOP,
        ControlAction.VOLUME_UP,
        ControlAction.VOLUME_DOWN,
        ControlAction.QUEUE,
    }
)

_FIXED_IDS: Final[dict[str, ControlAction]] = {
    "music_filter_clear": ControlAction.FILTER_CLEAR,
    "music_filter_select": ControlAction.FILTER_SELECT,
    "music_search_select": ControlAction.SEARCH_SELECT,
}


@dataclass(frozen=True, slots=True)
class ParsedControl:
    action: ControlAction
    argument: str | None = None


def custom_id_for(action: ControlAction, argument: str | None = None) -> str:
    """Build the ``custom_id`` that ``parse_custom_id`` maps back to ``action``."""
    if action.is_playback_control:
        return f"{_CONTROL_PREFIX}{action.value}"
    if action is ControlAction.FILTER_PRESET:
        return f"{_PRESET_PREFIX}{FilterPreset.parse(argument or '').value}"
    return f"{CUSTOM_ID_PREFIX}{action.value}"


def parse_custom_id(custom_id: str) -> ParsedControl | None:
    """Map a component id to its action.

    Returns None for ids outside the ``music_`` namespace, which belong to
    some other view.

    Raises:
        ValidationError: For a ``music_`` id that matches no action.
    """
    if not custom_id.startswith(CUSTOM_ID_PREFIX):
        return None

    if custom_id in _FIXED_IDS:
        return ParsedControl(_FIXED_IDS[custom_id])

    if custom_id.startswith(_PRESET_PREFIX):
        name = custom_id[len(_PRESET_PREFIX) :]
        try:
            preset = FilterPreset.parse(name)
        except ValidationError:
            raise ValidationError(ErrorMessages.UNKNOWN_CUSTOM_ID.format(custom_id=custom_id), "custom_id") from None
        return ParsedControl(ControlAction.FILTER_PRESET, preset.value)

    if custom_id.startswith(_CONTROL_PREFIX):
        try:
            action = ControlAction(custom_id[len(_CONTROL_PREFIX) :])
        except ValueError:
            action = None
        if action is not None and action.is_playback_control:
            return ParsedControl(action)

    raise ValidationError(ErrorMessages.UNKNOWN_CUSTOM_ID.format(custom_id=custom_id), "custom_id")


ControlHandler = Callable[[Any, "str | None"], Awaitable[None]]
"""``(interaction, argument)``."""


class ControlDispatcher:
    def __init__(self) -> None:
        self._handlers: dict[ControlAction, ControlHandler] = {}

    def __contains__(self, action: object) -> bool:
        return action in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def register(self, action: ControlAction, handler: ControlHandler) -> None:
        if action in self._handlers:
            raise BusinessRuleViolationError(
                "unique_control_handler",
                ErrorMessages.DUPLICATE_CONTROL_HANDLER.format(action=action.value),
            )
        self._handlers[action] = handler

    def validate(self) -> None:
        """Fail unless every action has a handler."""
        missing = [a.value for a in ControlAction if a not in self._handlers]
        if missing:
            raise BusinessRuleViolationError(
                "complete_control_table",
                ErrorMessages.MISSING_CONTROL_HANDLERS.format(actions=", ".join(missing)),
            )

    async def dispatch(self, interaction: Any, custom_id: str) -> bool:
        """Route one component interaction. Returns False if nothing handled it."""
        try:
            parsed = parse_custom_id(custom_id)
        except ValidationError:
            logger.warning(LogTemplates.CONTROL_UNKNOWN, custom_id)
            return False
        if parsed is None:
            return False

        handler = self._handlers.get(parsed.action)
        if handler is None:
            logger.warning(LogTemplates.CONTROL_UNKNOWN, custom_id)
            return False

        try:
            await handler(interaction, parsed.argument)
        except Exception:
            logger.exception(LogTemplates.CONTROL_HANDLER_FAILED, parsed.action.value)
            return False
        return True
