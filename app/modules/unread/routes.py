from fastapi import APIRouter, Depends
from app.modules.unread.schemas import UnreadRequest, UnreadResponse
from app.modules.unread.service import UnreadService
from app.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/unread", tags=["unread"])


def get_unread_service(supabase: Client = Depends(get_user_supabase)) -> UnreadService:
    return UnreadService(supabase)


@router.post("", response_model=UnreadResponse)
async def get_unread_counts(
    unread_request: UnreadRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: UnreadService = Depends(get_unread_service)
):
    """Unread group and per-sender DM counts since the caller's last-seen marks"""
    return service.get_unread(user_data["id"], unread_request)
