from datetime import datetime, timezone
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from marketplace.models.message import MessageDocument


class MessageRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def collection(self):
        return self._db["messages"]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("sender", ASCENDING), ("created_at", DESCENDING)])
        await self.collection.create_index([("receiver", ASCENDING), ("read", ASCENDING)])
        await self.collection.create_index([("listing", ASCENDING)])

    async def save_message(self, sender_id: str, receiver_id: str, listing_id: str, content: str) -> MessageDocument:
        doc: MessageDocument = {
            "sender": sender_id,
            "receiver": receiver_id,
            "listing": listing_id,
            "content": content,
            "created_at": datetime.now(timezone.utc),
            "read": False,
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = str(result.inserted_id)
        return doc

    async def find_for_participant(self, user_id: str) -> List[MessageDocument]:
        query = {"$or": [{"sender": user_id}, {"receiver": user_id}]}
        cursor = self.collection.find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        items = await cursor.to_list(length=None)
        for it in items:
            it["_id"] = str(it.get("_id"))
        return items

    async def find_thread(self, user_id: str, other_user_id: str, listing_id: str) -> List[MessageDocument]:
        query = {
            "$or": [
                {"sender": user_id, "receiver": other_user_id, "listing": listing_id},
                {"sender": other_user_id, "receiver": user_id, "listing": listing_id},
            ]
        }
        cursor = self.collection.find(query).sort([("created_at", ASCENDING), ("_id", ASCENDING)])
        items = await cursor.to_list(length=None)
        for it in items:
            it["_id"] = str(it.get("_id"))
        return items

    async def mark_read(self, receiver_id: str, sender_id: str, listing_id: str) -> int:
        result = await self.collection.update_many(
            {"sender": sender_id, "receiver": receiver_id, "listing": listing_id, "read": False},
            {"$set": {"read": True}},
        )
        return result.modified_count or 0

    async def delete_for_user(self, user_id: str) -> int:
        result = await self.collection.delete_many({"$or": [{"sender": user_id}, {"receiver": user_id}]})
        return result.deleted_count or 0
