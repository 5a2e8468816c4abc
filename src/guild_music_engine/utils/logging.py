"""Colored logging formatter for console output."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO

PACKAGE_PREFIX = "guild_music_engine."


class ColoredFormatter(logging.Formatter):
    """Logging formatter that colors the level name and shortens logger names.

    Colors are disabled when the ``NO_COLOR`` environment variable is set or
    when the output stream is not a TTY (e.g. redirected to a file). Logger
    names under the package drop the ``guild_music_engine.`` prefix.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Any = "%",
        *,
        stream: TextIO | None = None,
        short_names: bool = True,
    ) -> None:
        super().__init__(fmt, datefmt, style)
        self._stream = stream
        self._short_names = short_names

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        color = self._use_color()
        short = self._short_names and record.name.startswith(PACKAGE_PREFIX)
        if color or short:
            record = logging.makeLogRecord(record.__dict__)
        if short:
            record.name = record.name[len(PACKAGE_PREFIX) :]
        if color:
            record.levelname = f"{self.COLORS.get(record.levelno, '')}{record.levelname}{self.RESET}"
        return super().format(record)
