"""
Groups a user's flat message history into per-(counterpart, listing)
conversation summaries for the conversation list.

Input messages are "populated": ``sender``, ``receiver`` and ``listing`` hold
the referenced documents (with ``_id`` as ``str``) or ``None`` when the
reference no longer resolves.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from marketplace.exceptions import InvalidRequestingUserError
from marketplace.schemas.message import ConversationSummary, LastMessage, ListingSummary
from marketplace.schemas.user import UserSummary


logger = logging.getLogger(__name__)


class ConversationKey(NamedTuple):
    counterpart_id: str
    listing_id: str


def _ref_id(ref: Any) -> Optional[str]:
    if isinstance(ref, dict) and ref.get("_id"):
        return str(ref["_id"])
    return None


def is_resolvable(message: Dict[str, Any]) -> bool:
    """True when sender, receiver and listing all point at existing documents."""
    return all(_ref_id(message.get(field)) for field in ("sender", "receiver", "listing"))


def _recency(message: Dict[str, Any]) -> Tuple[datetime, str]:
    # message id breaks timestamp ties so the pick never depends on input order
    return message["created_at"], str(message["_id"])


def _is_unread_for(message: Dict[str, Any], user_id: str) -> bool:
    return _ref_id(message["receiver"]) == user_id and not message.get("read", False)


def build_conversations(messages: Iterable[Dict[str, Any]], requesting_user_id: str) -> List[ConversationSummary]:
    if not requesting_user_id:
        raise InvalidRequestingUserError("requesting user id is required")
    user_id = str(requesting_user_id)

    latest: Dict[ConversationKey, Dict[str, Any]] = {}
    counterparts: Dict[ConversationKey, Dict[str, Any]] = {}
    unread: Dict[ConversationKey, int] = {}

    for message in messages:
        if not is_resolvable(message):
            logger.debug("Skipping message %s with unresolved references", message.get("_id"))
            continue

        if _ref_id(message["sender"]) == user_id:
            counterpart = message["receiver"]
        else:
            counterpart = message["sender"]
        key = ConversationKey(_ref_id(counterpart), _ref_id(message["listing"]))

        current = latest.get(key)
        if current is None or _recency(message) > _recency(current):
            latest[key] = message
            counterparts[key] = counterpart
        unread[key] = unread.get(key, 0) + (1 if _is_unread_for(message, user_id) else 0)

    ordered = sorted(latest.items(), key=lambda item: _recency(item[1]), reverse=True)
    summaries: List[ConversationSummary] = []
    for key, last in ordered:
        counterpart = counterparts[key]
        listing = last["listing"]
        summaries.append(
            ConversationSummary(
                user=UserSummary(
                    id=key.counterpart_id,
                    first_name=counterpart.get("first_name") or "",
                    last_name=counterpart.get("last_name") or "",
                ),
                listing=ListingSummary(id=key.listing_id, title=listing.get("title") or "Untitled Listing"),
                last_message=LastMessage(
                    id=str(last["_id"]),
                    content=last.get("content") or "",
                    created_at=last["created_at"],
                ),
                unread_count=unread[key],
            )
        )
    return summaries
