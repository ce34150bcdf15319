from supabase import Client
from app.modules.messages.service import blank_to_none
from app.modules.snippets.models import DEFAULT_TITLE
from app.modules.snippets.schemas import SnippetCreate, SnippetResponse
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class SnippetService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_snippets(self, user_id: str) -> List[SnippetResponse]:
        """Caller's saved snippets, newest first"""
        try:
            result = self.supabase.table("saved_codes")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return [SnippetResponse(**snippet) for snippet in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_snippet(self, user_id: str, snippet_data: SnippetCreate) -> SnippetResponse:
        if not snippet_data.code.strip():
            raise HTTPException(status_code=400, detail="Code cannot be empty")
        title = (snippet_data.title or "").strip() or DEFAULT_TITLE
        output = blank_to_none(snippet_data.output)
        try:
            result = self.supabase.table("saved_codes").insert({
                "user_id": user_id,
                "title": title,
                "code": snippet_data.code,
                "output": output
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save code")

            logger.info(f"User {user_id} saved snippet '{title}'")
            return SnippetResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_snippet(self, snippet_id: str, user_id: str) -> SnippetResponse:
        """Someone else's snippet is reported as missing, same as RLS would"""
        try:
            result = self.supabase.table("saved_codes")\
                .select("*")\
                .eq("id", snippet_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Snippet not found")

            return SnippetResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_snippet(self, snippet_id: str, user_id: str) -> bool:
        try:
            result = self.supabase.table("saved_codes")\
                .delete()\
                .eq("id", snippet_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Snippet not found")

            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
