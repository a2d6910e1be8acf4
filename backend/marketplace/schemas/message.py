from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from marketplace.schemas.user import UserSummary


class MessageCreate(BaseModel):

    receiver: str
    listing: str
    content: str = Field(min_length=1, max_length=5000)


class MessagePublic(BaseModel):

    id: str
    sender: Optional[UserSummary] = None
    receiver: Optional[UserSummary] = None
    listing: str
    content: str
    created_at: datetime
    read: bool = False


class ListingSummary(BaseModel):

    id: str
    title: str = "Untitled Listing"


class LastMessage(BaseModel):

    id: str
    content: str
    created_at: datetime


class ConversationSummary(BaseModel):
    """One entry of the conversation list: a (counterpart, listing) pair."""

    user: UserSummary
    listing: ListingSummary
    last_message: LastMessage
    unread_count: int = Field(default=0, ge=0)


class MarkReadResult(BaseModel):

    updated: int
