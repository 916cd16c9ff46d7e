"""Error classification and rendering for Telegram tool calls.

Whatever a Bot API call raises is normalized into a TelegramErrorInfo before
it leaves the server:

    REMOTE_API  Telegram rejected the call (numeric error code + description)
    TRANSPORT   network/system failure before a response arrived
    GENERIC     unexpected exception carrying only a message
    UNKNOWN     anything that matches none of the shapes above

Raw errors are logged at DEBUG level only and never rendered to callers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from telegram.error import (
    BadRequest,
    ChatMigrated,
    Conflict,
    Forbidden,
    InvalidToken,
    NetworkError,
    RetryAfter,
    TimedOut,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT = "Telegram API operation"
UNKNOWN_DESCRIPTION = "Unknown error occurred"

# python-telegram-bot drops the HTTP status; restore it from the exception type.
# Order matters: BadRequest subclasses NetworkError.
_API_ERROR_CODES = (
    (InvalidToken, 401),
    (Forbidden, 403),
    (Conflict, 409),
    (RetryAfter, 429),
    (ChatMigrated, 400),
    (BadRequest, 400),
)


class ErrorKind(str, Enum):
    REMOTE_API = "remote_api"
    TRANSPORT = "transport"
    GENERIC = "generic"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TelegramErrorInfo:
    """Normalized error record.

    Attributes:
        kind: Which error shape was recognized.
        description: Human-readable description, safe to show to callers.
        code: Telegram error code, or a transport code such as an errno.
        context: Which operation/step failed.
    """

    kind: ErrorKind
    description: str
    code: int | str | None = None
    context: str | None = None


class TelegramOperationError(Exception):
    """Raised by the dispatcher once a send in a sequence has failed."""

    def __init__(self, info: TelegramErrorInfo):
        super().__init__(format_error(info))
        self.info = info


def _field(source: Any, name: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _message_of(error: Any) -> str | None:
    message = _field(error, "message")
    if isinstance(message, str) and message:
        return message
    if isinstance(error, BaseException) and str(error):
        return str(error)
    return None


def classify_error(error: Any, context: str | None = None) -> TelegramErrorInfo:
    """
    Normalize an arbitrary caught error into a TelegramErrorInfo.

    Shapes are tried in a fixed order: remote API error, transport error,
    generic message, plain string, and finally the unknown fallback.

    Args:
        error: Exception, mapping or string raised by a Bot API call
        context: Description of the failed operation (default: generic)

    Returns:
        The classified error record
    """
    if isinstance(error, TelegramOperationError):
        inner = error.info.context
        combined = f"{context}: {inner}" if context and inner else context or inner
        return replace(error.info, context=combined or DEFAULT_CONTEXT)

    context = context or DEFAULT_CONTEXT

    response = _field(error, "response")
    error_code = _field(response, "error_code") if response is not None else None
    if error_code:
        description = (
            _field(response, "description")
            or _message_of(error)
            or "Telegram API error"
        )
        return TelegramErrorInfo(ErrorKind.REMOTE_API, description, error_code, context)

    for error_type, status in _API_ERROR_CODES:
        if isinstance(error, error_type):
            description = _message_of(error) or "Telegram API error"
            return TelegramErrorInfo(ErrorKind.REMOTE_API, description, status, context)

    code = _field(error, "code")
    if not code:
        if isinstance(error, TimedOut):
            code = "ETIMEDOUT"
        elif isinstance(error, OSError):
            code = error.errno
    if code or isinstance(error, (NetworkError, OSError)):
        if isinstance(error, OSError) and error.strerror:
            description = error.strerror
        else:
            description = _message_of(error) or "Network or system error"
        return TelegramErrorInfo(ErrorKind.TRANSPORT, description, code or None, context)

    message = _message_of(error)
    if message:
        return TelegramErrorInfo(ErrorKind.GENERIC, message, None, context)

    if isinstance(error, str) and error:
        return TelegramErrorInfo(ErrorKind.GENERIC, error, None, context)

    return TelegramErrorInfo(ErrorKind.UNKNOWN, UNKNOWN_DESCRIPTION, None, context)


def format_error(info: TelegramErrorInfo) -> str:
    """Render an error record as the text returned to MCP callers."""
    if info.code is not None:
        message = f"Error {info.code}: {info.description}"
    else:
        message = f"Error: {info.description}"

    if info.context:
        message += f"\nContext: {info.context}"

    return message


def log_error(info: TelegramErrorInfo, operation: str, original: Any = None) -> None:
    """Log an error record; the raw original error only goes to DEBUG."""
    code = f"Code {info.code}: " if info.code is not None else ""
    logger.error(f"[{operation}] {code}{info.description}")

    if info.context:
        logger.error(f"[{operation}] Context: {info.context}")

    if original is not None and logger.isEnabledFor(logging.DEBUG):
        exc_info = original if isinstance(original, BaseException) else None
        logger.debug(f"[{operation}] Original error: {original!r}", exc_info=exc_info)
