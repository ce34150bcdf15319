from fastapi import APIRouter, Depends, Query
from app.config import settings
from app.modules.messages.schemas import MessageCreate, MessageCodeUpdate, MessageResponse
from app.modules.messages.service import MessageService
from app.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/messages", tags=["messages"])


def get_message_service(supabase: Client = Depends(get_user_supabase)) -> MessageService:
    return MessageService(supabase)


@router.get("", response_model=List[MessageResponse])
async def list_messages(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    service: MessageService = Depends(get_message_service)
):
    """Group chat history, oldest first"""
    return service.list_messages(limit=limit or settings.message_history_limit)


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    message_data: MessageCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: MessageService = Depends(get_message_service)
):
    """Post text, a code snippet, or both to the group chat"""
    return service.send_message(user_data["id"], message_data)


@router.patch("/{message_id}", response_model=MessageResponse)
async def update_message_code(
    message_id: str,
    update: MessageCodeUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: MessageService = Depends(get_message_service)
):
    """Edit the code attached to one of your own messages"""
    return service.update_code(message_id, user_data["id"], update)


@router.delete("/{message_id}", status_code=204)
async def delete_message(
    message_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: MessageService = Depends(get_message_service)
):
    service.delete_message(message_id, user_data["id"])
    return None
