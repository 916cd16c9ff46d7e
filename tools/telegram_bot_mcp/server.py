"""
Telegram Bot MCP Server

Exposes the Telegram Bot API as MCP tools over stdio.

Usage:
    TELEGRAM_BOT_API_TOKEN=... telegram-bot-mcp-server
    telegram-bot-mcp-server --env-file .env --log-level DEBUG

MCP client configuration:
    {
      "mcpServers": {
        "telegram_bot": {
          "command": "telegram-bot-mcp-server",
          "env": {"TELEGRAM_BOT_API_TOKEN": "your_bot_token_here"}
        }
      }
    }
"""

import argparse
import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastmcp import FastMCP
from telegram import Bot

from . import __version__
from .config import TOKEN_ENV_VAR, default_log_level, load_env_file, resolve_bot_token
from .dispatch import Sleep
from .errors import classify_error, format_error, log_error
from .tools import register_all_tools

logger = logging.getLogger(__name__)

PROG = "telegram-bot-mcp-server"
SERVER_NAME = "telegram_bot"

MISSING_TOKEN_HELP = f"""
Error: Missing Telegram Bot Token

Please set the {TOKEN_ENV_VAR} environment variable.

To get a bot token:
1. Open Telegram and search for @BotFather
2. Start a conversation and run: /newbot
3. Follow the prompts to create your bot
4. Copy the token and set it as an environment variable

Examples:
  {TOKEN_ENV_VAR}=your_token_here {PROG}

Or put it in a .env file in the working directory, or pass --env-file.
"""


def create_server(bot: Bot, *, sleep: Sleep = asyncio.sleep) -> FastMCP:
    """Build the MCP server with all Telegram tools registered on it."""

    @asynccontextmanager
    async def lifespan(server):
        """Server lifecycle: initialize the bot client, shut it down on exit."""
        logger.info("[Telegram MCP] Starting...")
        async with bot:
            yield
        logger.info("[Telegram MCP] Shutting down...")

    mcp = FastMCP(SERVER_NAME, version=__version__, lifespan=lifespan)
    register_all_tools(mcp, bot, sleep=sleep)
    return mcp


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="A Model Context Protocol (MCP) server for Telegram Bot API integration",
        epilog=f"Environment: {TOKEN_ENV_VAR} (required) - token from @BotFather",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"{PROG} v{__version__}",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        default=default_log_level(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO, or TELEGRAM_MCP_LOG_LEVEL)",
    )
    parser.add_argument(
        "--env-file",
        "-e",
        default=None,
        help="Path to a .env file (default: nearest .env from the working directory)",
    )

    args = parser.parse_args(argv)

    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    load_env_file(args.env_file)

    token, error = resolve_bot_token()
    if not token:
        logger.error(error)
        print(MISSING_TOKEN_HELP, file=sys.stderr)
        return 1

    server = create_server(Bot(token))

    try:
        logger.info("Telegram bot MCP Server running on stdio")
        server.run(transport="stdio")
    except KeyboardInterrupt:
        pass
    except Exception as e:
        info = classify_error(e, "Starting MCP server")
        log_error(info, "main", e)
        print(f"Failed to start Telegram bot MCP Server: {format_error(info)}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
