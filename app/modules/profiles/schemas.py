from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ProfileUpdate(BaseModel):
    username: Optional[str] = None
    avatar_emoji: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    user_id: str
    username: str
    avatar_emoji: str
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileSummary(BaseModel):
    user_id: str
    username: str
    avatar_emoji: str
