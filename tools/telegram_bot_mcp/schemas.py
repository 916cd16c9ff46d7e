"""Parameter schemas shared by the Telegram MCP tools."""

from typing import Annotated

from pydantic import BaseModel, Field

ChatId = Annotated[
    str,
    Field(description="Unique identifier for the target chat or username of the target channel"),
]

UserId = Annotated[int, Field(description="Unique identifier of the target user")]


class TelegramCommand(BaseModel):
    """One entry of the bot's command menu."""

    command: str = Field(min_length=1, description="Text of the command, without the leading slash")
    description: str = Field(min_length=1, description="Description of the command")
