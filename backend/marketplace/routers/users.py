from fastapi import APIRouter, Depends, HTTPException

from marketplace.routers.messages import get_chat_service
from marketplace.services.chat_service import ChatService
from marketplace.utils.dependencies import require_admin


router = APIRouter(prefix="/users", tags=["admin"])


@router.delete("/{user_id}/messages")
async def delete_user_messages(user_id: str, admin: dict = Depends(require_admin), service: ChatService = Depends(get_chat_service)):
    if user_id == admin["_id"]:
        raise HTTPException(status_code=400, detail="Admin cannot delete their own messages through this endpoint")
    deleted = await service.delete_user_messages(user_id)
    return {"deleted": deleted}
