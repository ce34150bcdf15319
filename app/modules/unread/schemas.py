from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import datetime


class UnreadRequest(BaseModel):
    # Client-kept "last seen" marks; a missing group mark means the chat was never opened
    group_last_seen: Optional[datetime] = None
    dm_last_seen: Dict[str, datetime] = Field(default_factory=dict)


class UnreadResponse(BaseModel):
    unread_group: int
    unread_dms: Dict[str, int]
    total_unread: int
