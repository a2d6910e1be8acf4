import logging
from typing import Any, Dict, List, Optional

from marketplace.exceptions import NotFoundError
from marketplace.repositories.listing_repository import ListingRepository
from marketplace.repositories.message_repository import MessageRepository
from marketplace.repositories.user_repository import UserRepository
from marketplace.schemas.message import ConversationSummary
from marketplace.services.conversation_aggregator import build_conversations


logger = logging.getLogger(__name__)


def _user_summary(user: Optional[dict]) -> Optional[Dict[str, Any]]:
    if not user:
        return None
    return {"id": user["_id"], "first_name": user.get("first_name") or "", "last_name": user.get("last_name") or ""}


class ChatService:

    def __init__(self, message_repo: MessageRepository, user_repo: UserRepository, listing_repo: ListingRepository) -> None:
        self._message_repo = message_repo
        self._user_repo = user_repo
        self._listing_repo = listing_repo

    async def _populate(self, messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Swap sender/receiver/listing ids for their documents, or None when gone."""
        user_ids = {m.get("sender") for m in messages} | {m.get("receiver") for m in messages}
        users = await self._user_repo.get_users_by_ids(u for u in user_ids if u)
        listings = await self._listing_repo.get_listings_by_ids(m.get("listing") for m in messages if m.get("listing"))
        populated = []
        for m in messages:
            populated.append({
                **m,
                "sender": users.get(m.get("sender")),
                "receiver": users.get(m.get("receiver")),
                "listing": listings.get(m.get("listing")),
            })
        return populated

    async def list_conversations(self, user_id: str) -> List[ConversationSummary]:
        messages = await self._message_repo.find_for_participant(user_id)
        populated = await self._populate(messages)
        return build_conversations(populated, user_id)

    async def get_thread(self, user_id: str, other_user_id: str, listing_id: str) -> List[Dict[str, Any]]:
        messages = await self._message_repo.find_thread(user_id, other_user_id, listing_id)
        users = await self._user_repo.get_users_by_ids([user_id, other_user_id])
        return [
            {
                "id": m["_id"],
                "sender": _user_summary(users.get(m["sender"])),
                "receiver": _user_summary(users.get(m["receiver"])),
                "listing": m["listing"],
                "content": m["content"],
                "created_at": m["created_at"],
                "read": m.get("read", False),
            }
            for m in messages
        ]

    async def send_message(self, sender_id: str, receiver_id: str, listing_id: str, content: str) -> Dict[str, Any]:
        if not content or not content.strip():
            raise ValueError("Message content cannot be empty")
        if sender_id == receiver_id:
            raise ValueError("Cannot send a message to yourself")
        receiver = await self._user_repo.get_user_by_id(receiver_id)
        if not receiver:
            raise NotFoundError("Receiver not found")
        if not await self._listing_repo.get_listing_by_id(listing_id):
            raise NotFoundError("Listing not found")

        saved = await self._message_repo.save_message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            listing_id=listing_id,
            content=content.strip(),
        )
        sender = await self._user_repo.get_user_by_id(sender_id)
        logger.info("Message %s sent from %s to %s about listing %s", saved["_id"], sender_id, receiver_id, listing_id)
        return {
            "id": saved["_id"],
            "sender": _user_summary(sender),
            "receiver": _user_summary(receiver),
            "listing": listing_id,
            "content": saved["content"],
            "created_at": saved["created_at"],
            "read": saved["read"],
        }

    async def mark_read(self, user_id: str, counterpart_id: str, listing_id: str) -> int:
        modified = await self._message_repo.mark_read(user_id, counterpart_id, listing_id)
        if modified:
            logger.info("Marked %d messages from %s on listing %s read for %s", modified, counterpart_id, listing_id, user_id)
        return modified

    async def delete_user_messages(self, user_id: str) -> int:
        deleted = await self._message_repo.delete_for_user(user_id)
        logger.info("Deleted %d messages for user %s", deleted, user_id)
        return deleted
