from fastapi import APIRouter, Depends, Query
from app.config import settings
from app.modules.direct_messages.schemas import DirectMessageCreate, DirectMessageResponse
from app.modules.direct_messages.service import DirectMessageService
from app.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict, Optional
from uuid import UUID

router = APIRouter(prefix="/direct-messages", tags=["direct-messages"])


def get_direct_message_service(supabase: Client = Depends(get_user_supabase)) -> DirectMessageService:
    return DirectMessageService(supabase)


@router.get("/{other_user_id}", response_model=List[DirectMessageResponse])
async def list_conversation(
    other_user_id: UUID,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    user_data: Dict = Depends(get_current_user_id),
    service: DirectMessageService = Depends(get_direct_message_service)
):
    """Conversation between the caller and another user"""
    return service.list_conversation(
        user_data["id"], str(other_user_id), limit=limit or settings.message_history_limit
    )


@router.post("/{other_user_id}", response_model=DirectMessageResponse, status_code=201)
async def send_direct_message(
    other_user_id: UUID,
    message_data: DirectMessageCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: DirectMessageService = Depends(get_direct_message_service)
):
    return service.send(user_data["id"], str(other_user_id), message_data)


@router.delete("/message/{message_id}", status_code=204)
async def delete_direct_message(
    message_id: UUID,
    user_data: Dict = Depends(get_current_user_id),
    service: DirectMessageService = Depends(get_direct_message_service)
):
    """Delete a direct message you sent"""
    service.delete(str(message_id), user_data["id"])
    return None
