from fastapi import APIRouter, Depends, HTTPException

from marketplace.schemas.assistant import AssistantReply, AssistantRequest
from marketplace.services.assistant_service import AssistantService


router = APIRouter(prefix="/chat", tags=["assistant"])


def get_assistant_service() -> AssistantService:
    return AssistantService()


@router.post("", response_model=AssistantReply)
async def chat(body: AssistantRequest, service: AssistantService = Depends(get_assistant_service)):
    try:
        return {"message": service.reply(body.messages, body.listings)}
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
