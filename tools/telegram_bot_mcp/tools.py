"""
Telegram Bot API tools for the MCP server.

Each tool maps onto one Bot API method. Tools never raise: failures are
classified, logged, and returned as "Error ..." text so the calling agent
always receives a well-formed result.
"""

import asyncio
import json
import logging
from typing import Annotated, Any, Optional

from fastmcp import FastMCP
from pydantic import Field
from telegram import Bot, BotCommand, TelegramObject

from .dispatch import Sleep, send_long_message, send_photo_with_long_caption
from .errors import classify_error, format_error, log_error
from .schemas import ChatId, TelegramCommand, UserId

logger = logging.getLogger(__name__)


def to_json(value: Any, indent: Optional[int] = 2) -> str:
    """Serialize Bot API results (TelegramObjects, lists, scalars) to JSON text."""
    return json.dumps(_to_plain(value), indent=indent, ensure_ascii=False)


def _to_plain(value: Any) -> Any:
    if isinstance(value, TelegramObject):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


def handle_tool_error(error: Exception, operation: str, context: str) -> str:
    """Classify, log and render an error raised inside a tool."""
    info = classify_error(error, context)
    log_error(info, operation, error)
    return format_error(info)


def register_all_tools(mcp: FastMCP, bot: Bot, *, sleep: Sleep = asyncio.sleep) -> None:
    """Register every Telegram tool on the MCP server.

    Args:
        mcp: Server to register the tools on
        bot: python-telegram-bot client used for all calls
        sleep: Pacing coroutine for multi-part sends (default: asyncio.sleep)
    """

    async def send_text(chat_id: str, text: str) -> None:
        await bot.send_message(chat_id=chat_id, text=text)

    async def send_photo(chat_id: str, media: str, caption: Optional[str]) -> None:
        await bot.send_photo(chat_id=chat_id, photo=media, caption=caption)

    # --- BOT IDENTITY ---

    @mcp.tool(
        name="get-me",
        description=(
            "A simple method for testing your bot's authentication token. Requires no "
            "parameters. Returns detailed bot information or comprehensive error details."
        ),
    )
    async def get_me() -> str:
        try:
            return to_json(await bot.get_me())
        except Exception as e:
            return handle_tool_error(e, "get-me", "Testing bot authentication")

    # --- MESSAGING ---

    @mcp.tool(
        name="send-message",
        description=(
            "Send message using a chat id. Automatically splits long messages that exceed "
            "Telegram's 4096 character limit while preserving word boundaries and formatting."
        ),
    )
    async def send_message(
        chatId: ChatId,
        text: Annotated[
            str,
            Field(
                description=(
                    "Message the user want to send to chat id. Long messages will be "
                    "automatically split into multiple parts."
                )
            ),
        ],
    ) -> str:
        try:
            await send_long_message(send_text, chatId, text, sleep=sleep)
            return "Message sent successfully to telegram chat"
        except Exception as e:
            return handle_tool_error(e, "send-message", f"Sending message to chat {chatId}")

    @mcp.tool(
        name="send-photo",
        description=(
            "Send photo with caption using a chat id. Automatically handles long captions "
            "that exceed Telegram's character limit by splitting them across multiple messages."
        ),
    )
    async def send_photo_tool(
        chatId: ChatId,
        media: Annotated[
            str,
            Field(
                description=(
                    "Photo to send. Pass a file_id as String to send a photo that exists on "
                    "the Telegram servers (recommended), or pass an HTTP URL as a String for "
                    "Telegram to get a photo from the Internet. The photo must be at most "
                    "10 MB in size. The photo's width and height must not exceed 10000 in "
                    "total. Width and height ratio must be at most 20"
                )
            ),
        ],
        text: Annotated[
            Optional[str],
            Field(
                description=(
                    "Caption for the photo. Long captions will be automatically split "
                    "into multiple messages."
                )
            ),
        ] = None,
    ) -> str:
        try:
            await send_photo_with_long_caption(
                send_photo, send_text, chatId, media, text, sleep=sleep
            )
            return "Photo sent successfully to telegram chat"
        except Exception as e:
            return handle_tool_error(e, "send-photo", f"Sending photo to chat {chatId}")

    # --- CHAT MEMBERS ---

    @mcp.tool(
        name="kick-chat-member",
        description=(
            "Kick a user from a group, a supergroup or a channel. Provides detailed error "
            "information if the operation fails."
        ),
    )
    async def kick_chat_member(chatId: ChatId, userId: UserId) -> str:
        try:
            await bot.ban_chat_member(chat_id=chatId, user_id=userId)
            return f"User {userId} banned from chat {chatId} successfully"
        except Exception as e:
            return handle_tool_error(
                e, "kick-chat-member", f"Banning user {userId} from chat {chatId}"
            )

    @mcp.tool(
        name="un-ban-chat-member",
        description=(
            "Use this method to unban a previously banned user in a supergroup or channel. "
            "The user will not return to the group or channel automatically. Provides "
            "detailed error information if the operation fails."
        ),
    )
    async def un_ban_chat_member(chatId: ChatId, userId: UserId) -> str:
        try:
            await bot.unban_chat_member(chat_id=chatId, user_id=userId, only_if_banned=True)
            return f"User {userId} unbanned from chat {chatId} successfully"
        except Exception as e:
            return handle_tool_error(
                e, "un-ban-chat-member", f"Unbanning user {userId} from chat {chatId}"
            )

    @mcp.tool(
        name="get-chat",
        description=(
            "Use this method to get up-to-date information about the chat. Returns detailed "
            "chat information or comprehensive error details."
        ),
    )
    async def get_chat(chatId: ChatId) -> str:
        try:
            return to_json(await bot.get_chat(chat_id=chatId))
        except Exception as e:
            return handle_tool_error(e, "get-chat", f"Getting chat information for {chatId}")

    @mcp.tool(
        name="get-chat-member-count",
        description="Use this method to get the number of members in a chat",
    )
    async def get_chat_member_count(chatId: ChatId) -> str:
        try:
            return to_json(await bot.get_chat_member_count(chat_id=chatId), indent=None)
        except Exception as e:
            return handle_tool_error(
                e, "get-chat-member-count", f"Getting member count for chat {chatId}"
            )

    @mcp.tool(
        name="get-chat-member",
        description="Get information about a member of a chat",
    )
    async def get_chat_member(chatId: ChatId, userId: UserId) -> str:
        try:
            return to_json(await bot.get_chat_member(chat_id=chatId, user_id=userId))
        except Exception as e:
            return handle_tool_error(
                e, "get-chat-member", f"Getting member {userId} info from chat {chatId}"
            )

    # --- BOT PROFILE ---

    @mcp.tool(
        name="set-my-short-description",
        description=(
            "Use this method to change the bot's short description, which is shown on the "
            "bot's profile page and is sent together with the link when users share the bot"
        ),
    )
    async def set_my_short_description(
        short_description: Annotated[
            str,
            Field(
                max_length=120,
                description=(
                    "New short description for the bot; 0-120 characters. Pass an empty "
                    "string to remove the dedicated short description"
                ),
            ),
        ],
    ) -> str:
        try:
            await bot.set_my_short_description(short_description=short_description)
            return "Successfully updated short description"
        except Exception as e:
            return handle_tool_error(
                e, "set-my-short-description", "Setting bot short description"
            )

    @mcp.tool(
        name="get-my-short-description",
        description="Use this method to get the current bot short description",
    )
    async def get_my_short_description() -> str:
        try:
            response = await bot.get_my_short_description()
            return response.short_description
        except Exception as e:
            return handle_tool_error(
                e, "get-my-short-description", "Getting bot short description"
            )

    @mcp.tool(
        name="set-my-commands",
        description="Use this method to change the list of the bot's commands",
    )
    async def set_my_commands(commands: list[TelegramCommand]) -> str:
        try:
            await bot.set_my_commands(
                [BotCommand(command=c.command, description=c.description) for c in commands]
            )
            return "Successfully updated bot commands"
        except Exception as e:
            return handle_tool_error(e, "set-my-commands", "Setting bot commands")

    @mcp.tool(
        name="get-my-commands",
        description="Use this method to get the current list of the bot's commands",
    )
    async def get_my_commands() -> str:
        try:
            return to_json(await bot.get_my_commands())
        except Exception as e:
            return handle_tool_error(e, "get-my-commands", "Getting bot commands")

    @mcp.tool(name="set-my-name", description="Use this method to change the bot's name")
    async def set_my_name(
        name: Annotated[
            str, Field(max_length=64, description="New bot name; 0-64 characters")
        ],
    ) -> str:
        try:
            await bot.set_my_name(name=name)
            return "Successfully updated bot name"
        except Exception as e:
            return handle_tool_error(e, "set-my-name", "Setting bot name")

    @mcp.tool(name="get-my-name", description="Use this method to get the bot's name")
    async def get_my_name() -> str:
        try:
            response = await bot.get_my_name()
            return response.name
        except Exception as e:
            return handle_tool_error(e, "get-my-name", "Getting bot name")

    @mcp.tool(
        name="set-my-description",
        description=(
            "Use this method to change the bot's description, which is shown in the chat "
            "with the bot if the chat is empty"
        ),
    )
    async def set_my_description(
        description: Annotated[
            str, Field(max_length=512, description="New bot description; 0-512 characters")
        ],
    ) -> str:
        try:
            await bot.set_my_description(description=description)
            return "Successfully updated bot description"
        except Exception as e:
            return handle_tool_error(e, "set-my-description", "Setting bot description")

    @mcp.tool(
        name="get-my-description",
        description="Use this method to get the bot's description",
    )
    async def get_my_description() -> str:
        try:
            response = await bot.get_my_description()
            return response.description
        except Exception as e:
            return handle_tool_error(e, "get-my-description", "Getting bot description")

    logger.debug("Registered Telegram tools")
