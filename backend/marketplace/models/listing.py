from typing import Literal, Optional, TypedDict


ListingStatus = Literal["Available", "Sold", "Pending"]


class ListingDocument(TypedDict, total=False):
    _id: str
    user: str
    title: str
    description: Optional[str]
    price: float
    category: str
    status: ListingStatus
