from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

TOKEN_ENV_VAR = "TELEGRAM_BOT_API_TOKEN"
LOG_LEVEL_ENV_VAR = "TELEGRAM_MCP_LOG_LEVEL"


def load_env_file(path: str | Path | None = None) -> bool:
    """Load variables from a .env file without overriding the environment.

    Without an explicit path, the nearest .env from the working directory
    upwards is used. Returns True if a file was loaded.
    """
    dotenv_path = str(path) if path else find_dotenv(usecwd=True)
    if not dotenv_path or not Path(dotenv_path).is_file():
        return False
    return load_dotenv(dotenv_path, override=False)


def resolve_bot_token(
    env: Mapping[str, str] | None = None,
) -> tuple[str | None, str | None]:
    """Read the bot token from the environment.

    Returns:
        (token, None) on success, (None, error_message) when it is missing.
    """
    runtime_env = env if env is not None else os.environ
    token = runtime_env.get(TOKEN_ENV_VAR, "").strip()
    if token:
        return token, None
    return None, f"Missing Telegram bot token: {TOKEN_ENV_VAR} is not set."


def default_log_level(env: Mapping[str, str] | None = None) -> str:
    runtime_env = env if env is not None else os.environ
    level = runtime_env.get(LOG_LEVEL_ENV_VAR, "INFO").strip().upper()
    return level if level in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"
