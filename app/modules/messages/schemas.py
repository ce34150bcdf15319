from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class MessageCreate(BaseModel):
    text: Optional[str] = None
    code_content: Optional[str] = None
    code_language: Optional[str] = None


class MessageCodeUpdate(BaseModel):
    code_content: str


class MessageResponse(BaseModel):
    id: str
    user_id: str
    text: Optional[str] = None
    code_content: Optional[str] = None
    code_language: Optional[str] = None
    created_at: datetime
    username: Optional[str] = None
    avatar_emoji: Optional[str] = None

    class Config:
        from_attributes = True
