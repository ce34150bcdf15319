from supabase import Client
from app.modules.profiles.avatars import DEFAULT_AVATAR, is_valid_avatar
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse, ProfileSummary
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def clean_username(username: Optional[str]) -> str:
    """Trimmed username; blank names are rejected"""
    cleaned = (username or "").strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail="Username is required")
    return cleaned


def check_avatar(avatar_emoji: str) -> str:
    if not is_valid_avatar(avatar_emoji):
        raise HTTPException(status_code=400, detail="Unknown avatar")
    return avatar_emoji


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_profiles(self) -> List[ProfileSummary]:
        """All profiles for the users sidebar, alphabetical"""
        try:
            result = self.supabase.table("profiles")\
                .select("user_id, username, avatar_emoji")\
                .order("username", desc=False)\
                .execute()
            return [ProfileSummary(**profile) for profile in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def find_profile(self, user_id: str) -> Optional[ProfileResponse]:
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            if not result.data:
                return None
            return ProfileResponse(**result.data[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_profile(self, user_id: str) -> ProfileResponse:
        profile = self.find_profile(user_id)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def create_profile(self, user_id: str, username: str, avatar_emoji: Optional[str] = None) -> ProfileResponse:
        """Create the profile row that accompanies a new auth user"""
        username = clean_username(username)
        avatar_emoji = check_avatar(avatar_emoji or DEFAULT_AVATAR)
        try:
            result = self.supabase.table("profiles").insert({
                "user_id": user_id,
                "username": username,
                "avatar_emoji": avatar_emoji
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create profile")

            logger.info(f"Created profile for user {user_id}")
            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update own profile"""
        update_data = {}
        if profile_data.username is not None:
            update_data["username"] = clean_username(profile_data.username)
        if profile_data.avatar_emoji is not None:
            update_data["avatar_emoji"] = check_avatar(profile_data.avatar_emoji)
        if not update_data:
            return self.get_profile(user_id)
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
