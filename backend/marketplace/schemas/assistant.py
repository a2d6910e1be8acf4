from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class AssistantMessage(BaseModel):

    role: Literal["user", "assistant"] = "user"
    content: str


class AssistantListing(BaseModel):

    title: str = ""
    description: Optional[str] = None
    price: float = 0
    category: str = ""


class AssistantRequest(BaseModel):

    messages: List[AssistantMessage] = Field(min_length=1)
    listings: List[AssistantListing] = Field(default_factory=list)


class AssistantReply(BaseModel):

    message: str
