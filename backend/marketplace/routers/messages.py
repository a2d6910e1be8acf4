from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from marketplace.database.connection import mongo_db_dependency
from marketplace.exceptions import NotFoundError
from marketplace.repositories.listing_repository import ListingRepository
from marketplace.repositories.message_repository import MessageRepository
from marketplace.repositories.user_repository import UserRepository
from marketplace.schemas.message import ConversationSummary, MarkReadResult, MessageCreate, MessagePublic
from marketplace.services.chat_service import ChatService
from marketplace.utils.dependencies import get_current_user


router = APIRouter(prefix="/messages", tags=["messages"])


def get_chat_service(db = Depends(mongo_db_dependency)) -> ChatService:
    msg_repo = MessageRepository(db)
    user_repo = UserRepository(db)
    listing_repo = ListingRepository(db)
    return ChatService(msg_repo, user_repo, listing_repo)


@router.get("/conversations", response_model=List[ConversationSummary])
async def list_conversations(current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    return await service.list_conversations(current_user["_id"])


@router.get("/{receiver_id}/{listing_id}", response_model=List[MessagePublic])
async def get_thread(receiver_id: str, listing_id: str, current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    return await service.get_thread(current_user["_id"], receiver_id, listing_id)


@router.post("", response_model=MessagePublic, status_code=status.HTTP_201_CREATED)
async def send_message(body: MessageCreate, current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    try:
        return await service.send_message(current_user["_id"], body.receiver, body.listing, body.content)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.patch("/read/{sender_id}/{listing_id}", response_model=MarkReadResult)
async def mark_read(sender_id: str, listing_id: str, current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    count = await service.mark_read(current_user["_id"], sender_id, listing_id)
    return {"updated": count}
