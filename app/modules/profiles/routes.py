from fastapi import APIRouter, Depends
from app.modules.profiles.avatars import AVATARS
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse, ProfileSummary
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_user_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("", response_model=List[ProfileSummary])
async def list_profiles(
    service: ProfileService = Depends(get_profile_service)
):
    """List every user's profile, ordered by username"""
    return service.list_profiles()


@router.get("/avatars", response_model=List[str])
async def list_avatars():
    """Avatar glyphs available when registering or editing a profile"""
    return AVATARS


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user_data: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_profile(user_data["id"])


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Update own username and/or avatar"""
    return service.update_profile(user_data["id"], profile_data)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_profile(user_id)
