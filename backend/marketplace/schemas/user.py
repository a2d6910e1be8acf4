from pydantic import BaseModel


class UserSummary(BaseModel):

    id: str
    first_name: str = ""
    last_name: str = ""
