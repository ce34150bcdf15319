from supabase import Client
from app.modules.messages.models import CODE_LANGUAGES, DEFAULT_CODE_LANGUAGE
from app.modules.messages.schemas import MessageCreate, MessageCodeUpdate, MessageResponse
from typing import List, Optional, Tuple, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

MESSAGE_COLUMNS = "*, profiles(username, avatar_emoji)"


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


def shape_message_body(
    text: Optional[str],
    code_content: Optional[str],
    code_language: Optional[str] = None
) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Return (text, code_content, code_language) as stored; blank parts become NULL"""
    text = blank_to_none(text)
    code_content = blank_to_none(code_content)
    if text is None and code_content is None:
        raise HTTPException(status_code=400, detail="Message must contain text or code")
    if code_content is None:
        return text, None, None
    language = (code_language or DEFAULT_CODE_LANGUAGE).strip().lower()
    if language not in CODE_LANGUAGES:
        raise HTTPException(status_code=400, detail=f"Unsupported code language: {language}")
    return text, code_content, language


def _flatten(row: Dict[str, Any]) -> MessageResponse:
    data = dict(row)
    profile = data.pop("profiles", None) or {}
    data["username"] = profile.get("username")
    data["avatar_emoji"] = profile.get("avatar_emoji")
    return MessageResponse(**data)


class MessageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_messages(self, limit: int = 200) -> List[MessageResponse]:
        """Latest messages with author profile, oldest first"""
        try:
            result = self.supabase.table("messages")\
                .select(MESSAGE_COLUMNS)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .execute()
            rows = list(reversed(result.data or []))
            return [_flatten(row) for row in rows]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def send_message(self, user_id: str, message_data: MessageCreate) -> MessageResponse:
        text, code_content, code_language = shape_message_body(
            message_data.text, message_data.code_content, message_data.code_language
        )
        try:
            result = self.supabase.table("messages").insert({
                "user_id": user_id,
                "text": text,
                "code_content": code_content,
                "code_language": code_language
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to send message")

            return _flatten(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _get_own_message(self, message_id: str, user_id: str) -> Dict[str, Any]:
        result = self.supabase.table("messages")\
            .select("*")\
            .eq("id", message_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Message not found")
        message = result.data[0]
        if message.get("user_id") != user_id:
            raise HTTPException(status_code=403, detail="Only the author can change this message")
        return message

    def update_code(self, message_id: str, user_id: str, update: MessageCodeUpdate) -> MessageResponse:
        """Replace the code of a code message; text and language stay as they are"""
        try:
            message = self._get_own_message(message_id, user_id)
            if not message.get("code_content"):
                raise HTTPException(status_code=400, detail="Message has no code to edit")
            if not update.code_content.strip():
                raise HTTPException(status_code=400, detail="Code content cannot be empty")

            result = self.supabase.table("messages")\
                .update({"code_content": update.code_content})\
                .eq("id", message_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Message not found")

            return _flatten(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_message(self, message_id: str, user_id: str) -> bool:
        try:
            self._get_own_message(message_id, user_id)
            result = self.supabase.table("messages")\
                .delete()\
                .eq("id", message_id)\
                .eq("user_id", user_id)\
                .execute()
            logger.info(f"User {user_id} deleted message {message_id}")
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
