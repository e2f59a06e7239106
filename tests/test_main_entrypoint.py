"""
Tests for main.py - Main Entry Point

Tests for the main entry point including:
- Logging configuration from JSON and the fallback path
- Token validation
- Container and bot creation
- Error handling around the bot run
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
from pydantic import SecretStr

from discord_jukebox.main import main, setup_logging


class TestLoggingSetup:
    """Tests for logging configuration."""

    def _write_config(self, tmp_path) -> tuple[dict, object]:
        config = {
            "version": 1,
            "disable_existing_loggers": False,
            "handlers": {},
            "loggers": {"discord": {"level": "WARNING"}, "httpx": {"level": "WARNING"}},
            "root": {"level": "INFO", "handlers": []},
        }
        path = tmp_path / "logging_config.json"
        path.write_text(json.dumps(config))
        return config, path

    def test_dictconfig_called_when_json_exists(self, tmp_path):
        config, path = self._write_config(tmp_path)
        with patch("logging.config.dictConfig") as mock_dc:
            setup_logging(config_path=path)

        mock_dc.assert_called_once_with(config)

    def test_fallback_to_basicconfig_when_json_missing(self, tmp_path):
        """Should fall back to a colored stdout handler."""
        with patch("logging.basicConfig") as mock_bc:
            setup_logging(config_path=tmp_path / "missing.json")

        mock_bc.assert_called_once()
        assert mock_bc.call_args.kwargs["level"] == logging.INFO
        [handler] = mock_bc.call_args.kwargs["handlers"]
        assert type(handler.formatter).__name__ == "ColoredFormatter"

    def test_fallback_when_json_malformed(self, tmp_path):
        path = tmp_path / "logging_config.json"
        path.write_text("{invalid json")
        with patch("logging.basicConfig") as mock_bc:
            setup_logging(config_path=path)

        mock_bc.assert_called_once()

    def test_root_logger_level_overridden(self, tmp_path):
        _, path = self._write_config(tmp_path)
        with (
            patch("logging.config.dictConfig"),
            patch("logging.getLogger") as mock_get_logger,
        ):
            setup_logging("debug", config_path=path)

        mock_get_logger.return_value.setLevel.assert_called_once_with(logging.DEBUG)

    def test_shipped_config_quiets_library_loggers(self):
        """The bundled logging_config.json should keep discord and httpx at WARNING."""
        from discord_jukebox.main import _LOGGING_CONFIG_PATH

        loaded = json.loads(_LOGGING_CONFIG_PATH.read_text())

        for name in ("discord", "httpx"):
            assert loaded["loggers"][name]["level"] == "WARNING"


class TestMainFunction:
    """Tests for main entry point function."""

    @pytest.fixture
    def mock_settings(self):
        settings = MagicMock()
        settings.discord.token = SecretStr("test_token_123")
        settings.log_level = "INFO"
        settings.environment = "test"
        return settings

    @pytest.fixture
    def patched(self, mock_settings):
        mock_bot = MagicMock()
        with (
            patch("discord_jukebox.config.settings.get_settings", return_value=mock_settings),
            patch("discord_jukebox.main.setup_logging"),
            patch("discord_jukebox.config.container.create_container") as mock_create,
            patch("discord_jukebox.infrastructure.discord.bot.create_bot", return_value=mock_bot),
        ):
            yield mock_bot, mock_create

    def test_main_returns_error_without_token(self, mock_settings, patched):
        mock_settings.discord.token = SecretStr("")
        mock_bot, mock_create = patched

        assert main() == 1
        mock_create.assert_not_called()

    def test_main_successful_run(self, mock_settings, patched):
        mock_bot, mock_create = patched

        assert main() == 0
        mock_create.assert_called_once_with(mock_settings)
        mock_bot.run_with_graceful_shutdown.assert_called_once_with("test_token_123")

    def test_main_handles_keyboard_interrupt(self, patched):
        mock_bot, _ = patched
        mock_bot.run_with_graceful_shutdown.side_effect = KeyboardInterrupt()

        assert main() == 0

    def test_main_handles_exception(self, patched):
        mock_bot, _ = patched
        mock_bot.run_with_graceful_shutdown.side_effect = RuntimeError("Bot crashed!")

        assert main() == 1
