"""
Ordered, paced delivery of long texts to a Telegram chat.

A text that does not fit into one message is split with split_message() and
sent part by part, each part tagged with a "Part i/N" marker. Sends are
strictly sequential with PACING_DELAY seconds between them. The first failed
send aborts the sequence; parts already delivered stay delivered.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from .errors import TelegramOperationError, classify_error
from .splitter import TELEGRAM_MESSAGE_LIMIT, split_message, utf16_len

logger = logging.getLogger(__name__)

PACING_DELAY = 0.1  # seconds between consecutive sends of one sequence

PART_ICON = "📄"

# Room kept free for "\n\n📄 Part 999/999" when a text has to be split.
# Lengths are UTF-16 code units, as Telegram counts them; the icon takes two.
PART_MARKER_RESERVE = 24

SendText = Callable[[str, str], Awaitable[Any]]
SendPhoto = Callable[[str, str, Optional[str]], Awaitable[Any]]
Sleep = Callable[[float], Awaitable[Any]]


def format_part(segment: str, index: int, total: int) -> str:
    """Append the part marker for segment index (0-based) of total."""
    if total <= 1:
        return segment
    return f"{segment}\n\n{PART_ICON} Part {index + 1}/{total}"


def plan_parts(text: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> list[str]:
    """Split text so every decorated part still fits within limit."""
    if utf16_len(text) <= limit:
        return split_message(text, limit)
    return split_message(text, limit - PART_MARKER_RESERVE)


async def send_long_message(
    send_text: SendText,
    chat_id: str,
    text: str,
    *,
    limit: int = TELEGRAM_MESSAGE_LIMIT,
    sleep: Sleep = asyncio.sleep,
) -> None:
    """
    Send text to a chat, splitting it into numbered parts when needed.

    Args:
        send_text: Coroutine function sending one message, (chat_id, text)
        chat_id: Target chat id or channel username
        text: Message text of any length
        limit: Per-message ceiling in UTF-16 code units (default: 4096)
        sleep: Pacing coroutine (default: asyncio.sleep)

    Raises:
        TelegramOperationError: On the first failed send. Its context names
            the failing part, e.g. "Failed to send message part 2/3".
    """
    parts = plan_parts(text, limit)
    total = len(parts)

    if total > 1:
        logger.info(f"Sending {total} parts to chat {chat_id}")

    for index, part in enumerate(parts):
        try:
            await send_text(chat_id, format_part(part, index, total))
        except Exception as e:
            raise TelegramOperationError(
                classify_error(e, f"Failed to send message part {index + 1}/{total}")
            ) from e

        if index < total - 1:
            await sleep(PACING_DELAY)


async def send_photo_with_long_caption(
    send_photo: SendPhoto,
    send_text: SendText,
    chat_id: str,
    media: str,
    caption: Optional[str] = None,
    *,
    limit: int = TELEGRAM_MESSAGE_LIMIT,
    sleep: Sleep = asyncio.sleep,
) -> None:
    """
    Send a photo, moving caption overflow into follow-up text messages.

    Short (or missing) captions go out with a single send_photo call. A long
    caption is split: part 1 becomes the photo caption and the remaining
    parts are sent through send_text, in order, each marked "Part i/N".

    Args:
        send_photo: Coroutine function (chat_id, media, caption)
        send_text: Coroutine function (chat_id, text)
        chat_id: Target chat id or channel username
        media: Telegram file_id or HTTP URL of the photo
        caption: Optional caption of any length
        limit: Per-message ceiling in UTF-16 code units (default: 4096)
        sleep: Pacing coroutine (default: asyncio.sleep)

    Raises:
        TelegramOperationError: On the first failed send.
    """
    if not caption or utf16_len(caption) <= limit or not caption.strip():
        try:
            await send_photo(chat_id, media, caption)
        except Exception as e:
            raise TelegramOperationError(classify_error(e, "Failed to send photo")) from e
        return

    parts = plan_parts(caption, limit)
    total = len(parts)
    logger.info(f"Caption split into {total} parts for chat {chat_id}")

    try:
        await send_photo(chat_id, media, format_part(parts[0], 0, total))
    except Exception as e:
        raise TelegramOperationError(
            classify_error(e, f"Failed to send photo with caption part 1/{total}")
        ) from e

    for index in range(1, total):
        await sleep(PACING_DELAY)
        try:
            await send_text(chat_id, format_part(parts[index], index, total))
        except Exception as e:
            raise TelegramOperationError(
                classify_error(e, f"Failed to send caption part {index + 1}/{total}")
            ) from e
