"""In-memory stand-ins for the Mongo repositories."""

from datetime import datetime, timedelta
from itertools import count
from typing import Any, Dict, Iterable, List, Optional

import pytest

from marketplace.services.chat_service import ChatService


BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


class InMemoryMessageRepository:

    def __init__(self) -> None:
        self.messages: List[Dict[str, Any]] = []
        self._ids = count(1)

    def add(self, sender: str, receiver: str, listing: str, content: str = "hi", minutes: int = 0, read: bool = False) -> Dict[str, Any]:
        doc = {
            "_id": f"m{next(self._ids):03d}",
            "sender": sender,
            "receiver": receiver,
            "listing": listing,
            "content": content,
            "created_at": BASE_TIME + timedelta(minutes=minutes),
            "read": read,
        }
        self.messages.append(doc)
        return doc

    async def save_message(self, sender_id: str, receiver_id: str, listing_id: str, content: str) -> Dict[str, Any]:
        return self.add(sender_id, receiver_id, listing_id, content, minutes=len(self.messages) + 1000)

    async def find_for_participant(self, user_id: str) -> List[Dict[str, Any]]:
        return [dict(m) for m in self.messages if user_id in (m["sender"], m["receiver"])]

    async def find_thread(self, user_id: str, other_user_id: str, listing_id: str) -> List[Dict[str, Any]]:
        pair = {user_id, other_user_id}
        items = [dict(m) for m in self.messages if {m["sender"], m["receiver"]} == pair and m["listing"] == listing_id]
        return sorted(items, key=lambda m: (m["created_at"], m["_id"]))

    async def mark_read(self, receiver_id: str, sender_id: str, listing_id: str) -> int:
        modified = 0
        for m in self.messages:
            if m["sender"] == sender_id and m["receiver"] == receiver_id and m["listing"] == listing_id and not m["read"]:
                m["read"] = True
                modified += 1
        return modified

    async def delete_for_user(self, user_id: str) -> int:
        before = len(self.messages)
        self.messages = [m for m in self.messages if user_id not in (m["sender"], m["receiver"])]
        return before - len(self.messages)


class InMemoryUserRepository:

    def __init__(self, users: Dict[str, dict]) -> None:
        self.users = users

    async def get_user_by_id(self, user_id: str) -> Optional[dict]:
        return self.users.get(user_id)

    async def get_users_by_ids(self, user_ids: Iterable[str]) -> Dict[str, dict]:
        return {u: self.users[u] for u in set(user_ids) if u in self.users}


class InMemoryListingRepository:

    def __init__(self, listings: Dict[str, dict]) -> None:
        self.listings = listings

    async def get_listing_by_id(self, listing_id: str) -> Optional[dict]:
        return self.listings.get(listing_id)

    async def get_listings_by_ids(self, listing_ids: Iterable[str]) -> Dict[str, dict]:
        return {i: self.listings[i] for i in set(listing_ids) if i in self.listings}


@pytest.fixture
def users():
    return {
        "alice": {"_id": "alice", "first_name": "Alice", "last_name": "Ng", "is_admin": False},
        "bob": {"_id": "bob", "first_name": "Bob", "last_name": "Diaz", "is_admin": False},
        "carol": {"_id": "carol", "first_name": "Carol", "last_name": "Kim", "is_admin": True},
    }


@pytest.fixture
def listings():
    return {
        "desk": {"_id": "desk", "title": "Standing desk"},
        "bike": {"_id": "bike", "title": "Road bike"},
    }


@pytest.fixture
def message_repo():
    return InMemoryMessageRepository()


@pytest.fixture
def user_repo(users):
    return InMemoryUserRepository(users)


@pytest.fixture
def chat_service(message_repo, user_repo, listings):
    return ChatService(message_repo, user_repo, InMemoryListingRepository(listings))
