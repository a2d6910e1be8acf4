from typing import Dict, Iterable, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from marketplace.models.user import UserDocument


_PUBLIC_FIELDS = {"first_name": 1, "last_name": 1, "email": 1, "is_admin": 1}


class UserRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db.get_collection("users")

    async def get_user_by_id(self, user_id: str) -> Optional[UserDocument]:

        if not ObjectId.is_valid(user_id):
            return None
        user = await self._collection.find_one({"_id": ObjectId(user_id)}, _PUBLIC_FIELDS)
        if user:
            user["_id"] = str(user["_id"])  # normalize to string for API layer
        return user

    async def get_users_by_ids(self, user_ids: Iterable[str]) -> Dict[str, UserDocument]:

        oids = [ObjectId(u) for u in set(user_ids) if u and ObjectId.is_valid(u)]
        if not oids:
            return {}
        users: Dict[str, UserDocument] = {}
        async for doc in self._collection.find({"_id": {"$in": oids}}, _PUBLIC_FIELDS):
            doc["_id"] = str(doc["_id"])
            users[doc["_id"]] = doc
        return users
