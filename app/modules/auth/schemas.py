from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from app.modules.profiles.avatars import DEFAULT_AVATAR
from app.modules.profiles.schemas import ProfileResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    username: str
    avatar_emoji: Optional[str] = DEFAULT_AVATAR


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str
    profile: Optional[ProfileResponse] = None


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    profile: Optional[ProfileResponse] = None
