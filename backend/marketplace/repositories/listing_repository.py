from typing import Dict, Iterable, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from marketplace.models.listing import ListingDocument


class ListingRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db.get_collection("listings")

    async def get_listing_by_id(self, listing_id: str) -> Optional[ListingDocument]:
        if not ObjectId.is_valid(listing_id):
            return None
        listing = await self._collection.find_one({"_id": ObjectId(listing_id)}, {"title": 1, "user": 1})
        if listing:
            listing["_id"] = str(listing["_id"])
        return listing

    async def get_listings_by_ids(self, listing_ids: Iterable[str]) -> Dict[str, ListingDocument]:
        oids = [ObjectId(i) for i in set(listing_ids) if i and ObjectId.is_valid(i)]
        if not oids:
            return {}
        listings: Dict[str, ListingDocument] = {}
        async for doc in self._collection.find({"_id": {"$in": oids}}, {"title": 1}):
            doc["_id"] = str(doc["_id"])
            listings[doc["_id"]] = doc
        return listings
