from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class DirectMessageCreate(BaseModel):
    text: Optional[str] = None
    code_content: Optional[str] = None


class DirectMessageResponse(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    text: Optional[str] = None
    code_content: Optional[str] = None
    code_language: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
