from supabase import Client
from app.modules.unread.schemas import UnreadRequest, UnreadResponse
from datetime import datetime, timezone
from typing import Dict, Optional
from fastapi import HTTPException


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


class UnreadService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def count_group_unread(self, user_id: str, since: Optional[datetime]) -> int:
        """Group messages from other users newer than the last-seen mark"""
        if since is None:
            return 0
        try:
            result = self.supabase.table("messages")\
                .select("id", count="exact")\
                .neq("user_id", user_id)\
                .gt("created_at", as_utc(since).isoformat())\
                .execute()
            return result.count or 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def count_dm_unread(self, user_id: str, last_seen: Dict[str, datetime]) -> Dict[str, int]:
        """Received direct messages per sender, newer than that sender's last-seen mark"""
        try:
            result = self.supabase.table("direct_messages")\
                .select("sender_id, created_at")\
                .eq("receiver_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        marks = {sender: as_utc(ts) for sender, ts in last_seen.items()}
        counts: Dict[str, int] = {}
        for row in result.data or []:
            sender_id = row["sender_id"]
            mark = marks.get(sender_id)
            if mark is None or parse_timestamp(row["created_at"]) > mark:
                counts[sender_id] = counts.get(sender_id, 0) + 1
        return counts

    def get_unread(self, user_id: str, request: UnreadRequest) -> UnreadResponse:
        unread_group = self.count_group_unread(user_id, request.group_last_seen)
        unread_dms = self.count_dm_unread(user_id, request.dm_last_seen)
        return UnreadResponse(
            unread_group=unread_group,
            unread_dms=unread_dms,
            total_unread=unread_group + sum(unread_dms.values())
        )
