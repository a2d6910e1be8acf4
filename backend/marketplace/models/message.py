from datetime import datetime
from typing import TypedDict


class MessageDocument(TypedDict, total=False):
    _id: str
    sender: str
    receiver: str
    listing: str
    content: str
    created_at: datetime
    # flips False -> True only through mark_read
    read: bool
