"""Records persisted in the extension's local storage."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Tone = Literal["neutral", "professional", "casual", "funny", "empathetic"]
ReplyLength = Literal["short", "medium", "long"]


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


class UserAccount(BaseModel):
    """Daily usage and tier of the local user.

    Aliases match the keys the browser build stores, so records written by
    either side load unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    daily_replies_used: int = Field(default=0, ge=0, alias="dailyRepliesUsed")
    last_reset: datetime = Field(default_factory=local_now, alias="lastReset")
    is_pro: bool = Field(default=False, alias="isProUser")


class Preferences(BaseModel):
    """User-chosen reply style."""

    model_config = ConfigDict(populate_by_name=True)

    tone: Tone = "neutral"
    reply_length: ReplyLength = Field(default="medium", alias="replyLength")
    enable_keyboard_shortcut: bool = Field(default=True, alias="enableKeyboardShortcut")
