from supabase import Client
from app.modules.direct_messages.models import DM_CODE_LANGUAGE
from app.modules.direct_messages.schemas import DirectMessageCreate, DirectMessageResponse
from app.modules.messages.service import shape_message_body
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def conversation_filter(user_id: str, other_user_id: str) -> str:
    """PostgREST or-filter matching both directions of a conversation"""
    return (
        f"and(sender_id.eq.{user_id},receiver_id.eq.{other_user_id}),"
        f"and(sender_id.eq.{other_user_id},receiver_id.eq.{user_id})"
    )


class DirectMessageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_conversation(self, user_id: str, other_user_id: str, limit: int = 200) -> List[DirectMessageResponse]:
        """Messages exchanged between the two users, oldest first"""
        try:
            result = self.supabase.table("direct_messages")\
                .select("*")\
                .or_(conversation_filter(user_id, other_user_id))\
                .order("created_at", desc=False)\
                .limit(limit)\
                .execute()
            return [DirectMessageResponse(**dm) for dm in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def send(self, sender_id: str, receiver_id: str, message_data: DirectMessageCreate) -> DirectMessageResponse:
        if sender_id == receiver_id:
            raise HTTPException(status_code=400, detail="Cannot send a direct message to yourself")
        text, code_content, code_language = shape_message_body(
            message_data.text, message_data.code_content, DM_CODE_LANGUAGE
        )
        try:
            receiver = self.supabase.table("profiles")\
                .select("user_id")\
                .eq("user_id", receiver_id)\
                .limit(1)\
                .execute()
            if not receiver.data:
                raise HTTPException(status_code=404, detail="User not found")

            result = self.supabase.table("direct_messages").insert({
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "text": text,
                "code_content": code_content,
                "code_language": code_language
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to send direct message")

            return DirectMessageResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete(self, message_id: str, sender_id: str) -> bool:
        """Delete a direct message you sent"""
        try:
            existing = self.supabase.table("direct_messages")\
                .select("sender_id, receiver_id")\
                .eq("id", message_id)\
                .limit(1)\
                .execute()
            if not existing.data:
                raise HTTPException(status_code=404, detail="Direct message not found")
            row = existing.data[0]
            if row["sender_id"] != sender_id:
                if row["receiver_id"] != sender_id:
                    raise HTTPException(status_code=404, detail="Direct message not found")
                raise HTTPException(status_code=403, detail="Only the sender can delete this message")

            result = self.supabase.table("direct_messages")\
                .delete()\
                .eq("id", message_id)\
                .eq("sender_id", sender_id)\
                .execute()
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
