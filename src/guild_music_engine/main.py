#!/usr/bin/env python3
"""Entry point for the guild music engine bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path

from guild_music_engine.domain.shared.messages import ErrorMessages, LogTemplates
from guild_music_engine.utils.logging import ColoredFormatter

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that flood DEBUG output
_NOISY_LOGGERS = ("discord.gateway", "discord.voice_state", "discord.player")


def setup_logging(log_level: str = "INFO", config_path: Path | None = None) -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)
    path = config_path or _LOGGING_CONFIG_PATH

    try:
        with open(path) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ColoredFormatter(_LOG_FORMAT, _DATE_FORMAT, stream=sys.stdout))
        logging.basicConfig(level=resolved_level, handlers=[handler], force=True)
        logging.warning("Could not load %s, falling back to basic config", path)

    logging.getLogger().setLevel(resolved_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved_level, logging.INFO))


def main() -> int:
    from guild_music_engine.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)

    token_value = settings.discord.token.get_secret_value()
    if not token_value:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(LogTemplates.BOT_STARTING.format(environment=settings.environment))

    from guild_music_engine.config.container import create_container
    from guild_music_engine.infrastructure.discord.bot import create_bot

    container = create_container(settings)
    bot = create_bot(container, settings)

    try:
        logger.info(LogTemplates.BOT_STARTING_RUN)
        bot.run_with_graceful_shutdown(token_value)
        logger.info(LogTemplates.BOT_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (``guild-music-engine``)."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
