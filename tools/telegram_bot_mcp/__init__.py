"""
Telegram Bot MCP — the Telegram Bot API as Model Context Protocol tools

Components:
    - splitter: Breaks long text into segments that fit a Telegram message
    - dispatch: Sends segments in order with part markers and pacing
    - errors: Normalizes Bot API failures into caller-safe error text
    - tools: Registers one MCP tool per Bot API method
    - server: FastMCP server factory and the stdio entry point

Usage:
    from telegram import Bot
    from telegram_bot_mcp.server import create_server

    create_server(Bot(token)).run(transport="stdio")
"""

__version__ = "1.0.0"

from .dispatch import (
    PACING_DELAY,
    format_part,
    send_long_message,
    send_photo_with_long_caption,
)
from .errors import (
    ErrorKind,
    TelegramErrorInfo,
    TelegramOperationError,
    classify_error,
    format_error,
)
from .splitter import TELEGRAM_MESSAGE_LIMIT, split_message

__all__ = [
    "PACING_DELAY",
    "TELEGRAM_MESSAGE_LIMIT",
    "ErrorKind",
    "TelegramErrorInfo",
    "TelegramOperationError",
    "classify_error",
    "format_error",
    "format_part",
    "send_long_message",
    "send_photo_with_long_caption",
    "split_message",
]
