from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class SnippetCreate(BaseModel):
    title: Optional[str] = None
    code: str = Field(min_length=1)
    output: Optional[str] = None


class SnippetResponse(BaseModel):
    id: str
    user_id: str
    title: str
    code: str
    output: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
