from typing import Optional, TypedDict


class UserDocument(TypedDict, total=False):

    _id: str
    email: str
    first_name: str
    last_name: str
    is_admin: Optional[bool]
