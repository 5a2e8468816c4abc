"""
Tests for main.py - Main Entry Point

Tests for:
- Logging configuration from logging_config.json and the fallback path
- Token validation
- Container and bot wiring
- Exit codes for clean stops, interrupts and crashes
"""

import json
import logging
from unittest.mock import MagicMock, mock_open, patch

import pytest
from pydantic import SecretStr

from guild_music_engine.main import cli, main, setup_logging
from guild_music_engine.utils.logging import ColoredFormatter


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLoggingSetup:
    """Tests for logging configuration."""

    def _config(self) -> dict:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "handlers": {},
            "loggers": {"discord": {"level": "INFO"}},
            "root": {"level": "INFO", "handlers": []},
        }

    def test_dictconfig_called_when_json_exists(self):
        config = self._config()
        with (
            patch("builtins.open", mock_open(read_data=json.dumps(config))),
            patch("logging.config.dictConfig") as mock_dc,
        ):
            setup_logging()

        mock_dc.assert_called_once_with(config)

    def test_fallback_when_json_missing(self, restore_logging):
        with (
            patch("builtins.open", side_effect=FileNotFoundError),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging("WARNING")

        mock_bc.assert_called_once()
        kwargs = mock_bc.call_args.kwargs
        assert kwargs["level"] == logging.WARNING
        assert kwargs["force"] is True
        assert isinstance(kwargs["handlers"][0].formatter, ColoredFormatter)

    def test_fallback_when_json_malformed(self, restore_logging):
        with (
            patch("builtins.open", mock_open(read_data="{invalid json")),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging()

        mock_bc.assert_called_once()

    def test_root_level_follows_argument(self, restore_logging):
        with (
            patch("builtins.open", mock_open(read_data=json.dumps(self._config()))),
            patch("logging.config.dictConfig"),
        ):
            setup_logging("DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_noisy_discord_loggers_capped_at_info(self, restore_logging):
        with (
            patch("builtins.open", mock_open(read_data=json.dumps(self._config()))),
            patch("logging.config.dictConfig"),
        ):
            setup_logging("DEBUG")

        assert logging.getLogger("discord.gateway").level == logging.INFO
        assert logging.getLogger("discord.player").level == logging.INFO

    def test_shipped_config_is_valid(self):
        from guild_music_engine import main as main_module

        with open(main_module._LOGGING_CONFIG_PATH) as f:
            config = json.load(f)

        assert config["formatters"]["console"]["()"] == "guild_music_engine.utils.logging.ColoredFormatter"
        assert config["loggers"]["guild_music_engine"]["level"] == "DEBUG"


def _settings(token: str = "test_token_123") -> MagicMock:
    settings = MagicMock()
    settings.discord.token = SecretStr(token)
    settings.log_level = "INFO"
    settings.environment = "test"
    return settings


class TestMainFunction:
    """Tests for the main entry point."""

    @pytest.fixture
    def wiring(self):
        settings = _settings()
        bot = MagicMock()
        container = MagicMock()
        with (
            patch("guild_music_engine.config.settings.get_settings", return_value=settings),
            patch("guild_music_engine.main.setup_logging"),
            patch("guild_music_engine.config.container.create_container", return_value=container) as create_container,
            patch("guild_music_engine.infrastructure.discord.bot.create_bot", return_value=bot) as create_bot,
        ):
            yield settings, container, bot, create_container, create_bot

    def test_missing_token_exits_with_error(self):
        with (
            patch("guild_music_engine.config.settings.get_settings", return_value=_settings("")),
            patch("guild_music_engine.main.setup_logging"),
            patch("guild_music_engine.config.container.create_container") as create_container,
        ):
            assert main() == 1

        create_container.assert_not_called()

    def test_successful_run(self, wiring):
        settings, container, bot, create_container, create_bot = wiring

        assert main() == 0

        create_container.assert_called_once_with(settings)
        create_bot.assert_called_once_with(container, settings)
        bot.run_with_graceful_shutdown.assert_called_once_with("test_token_123")

    def test_keyboard_interrupt_is_clean(self, wiring):
        bot = wiring[2]
        bot.run_with_graceful_shutdown.side_effect = KeyboardInterrupt()

        assert main() == 0

    def test_crash_exits_with_error(self, wiring):
        bot = wiring[2]
        bot.run_with_graceful_shutdown.side_effect = RuntimeError("Bot crashed!")

        assert main() == 1

    def test_cli_exits_with_main_status(self):
        with patch("guild_music_engine.main.main", return_value=3):
            with pytest.raises(SystemExit) as exc_info:
                cli()

        assert exc_info.value.code == 3
