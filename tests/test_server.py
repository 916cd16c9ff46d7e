#!/usr/bin/env python3

import importlib
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from telegram.error import InvalidToken


sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))

config = importlib.import_module("telegram_bot_mcp.config")
server_mod = importlib.import_module("telegram_bot_mcp.server")


class TestConfig:
    def test_resolve_bot_token(self):
        token, error = config.resolve_bot_token({"TELEGRAM_BOT_API_TOKEN": " 123:abc "})
        assert token == "123:abc"
        assert error is None

    def test_resolve_bot_token_missing(self):
        token, error = config.resolve_bot_token({"TELEGRAM_BOT_API_TOKEN": "  "})
        assert token is None
        assert "TELEGRAM_BOT_API_TOKEN" in error

    def test_default_log_level(self):
        assert config.default_log_level({"TELEGRAM_MCP_LOG_LEVEL": "debug"}) == "DEBUG"
        assert config.default_log_level({"TELEGRAM_MCP_LOG_LEVEL": "loud"}) == "INFO"
        assert config.default_log_level({}) == "INFO"

    def test_load_env_file_does_not_override(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "TELEGRAM_BOT_API_TOKEN=from-file\nTELEGRAM_MCP_TEST_EXTRA=1\n", encoding="utf-8"
        )
        monkeypatch.setenv("TELEGRAM_BOT_API_TOKEN", "from-env")
        monkeypatch.delenv("TELEGRAM_MCP_TEST_EXTRA", raising=False)

        assert config.load_env_file(env_file) is True

        token, _ = config.resolve_bot_token()
        assert token == "from-env"
        monkeypatch.delenv("TELEGRAM_MCP_TEST_EXTRA")

    def test_load_env_file_missing(self, tmp_path):
        assert config.load_env_file(tmp_path / "absent.env") is False


class TestMain:
    @patch("telegram_bot_mcp.server.create_server")
    @patch("telegram_bot_mcp.server.load_env_file")
    def test_missing_token_fails_fast(self, _mock_env, mock_create, monkeypatch, capsys):
        monkeypatch.delenv("TELEGRAM_BOT_API_TOKEN", raising=False)

        assert server_mod.main([]) == 1

        mock_create.assert_not_called()
        assert "TELEGRAM_BOT_API_TOKEN" in capsys.readouterr().err

    @patch("telegram_bot_mcp.server.Bot")
    @patch("telegram_bot_mcp.server.create_server")
    @patch("telegram_bot_mcp.server.load_env_file")
    def test_runs_on_stdio(self, _mock_env, mock_create, mock_bot, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_API_TOKEN", "123:abc")

        assert server_mod.main([]) == 0

        mock_bot.assert_called_once_with("123:abc")
        mock_create.return_value.run.assert_called_once_with(transport="stdio")

    @patch("telegram_bot_mcp.server.Bot")
    @patch("telegram_bot_mcp.server.create_server")
    @patch("telegram_bot_mcp.server.load_env_file")
    def test_startup_failure_is_reported(
        self, _mock_env, mock_create, _mock_bot, monkeypatch, capsys
    ):
        monkeypatch.setenv("TELEGRAM_BOT_API_TOKEN", "123:abc")
        mock_create.return_value.run.side_effect = InvalidToken()

        assert server_mod.main([]) == 1

        err = capsys.readouterr().err
        assert "Failed to start Telegram bot MCP Server: Error 401" in err
        assert "Context: Starting MCP server" in err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            server_mod.main(["--version"])

        assert exc_info.value.code == 0
        assert "telegram-bot-mcp-server v1.0.0" in capsys.readouterr().out
