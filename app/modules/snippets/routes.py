from fastapi import APIRouter, Depends
from app.modules.snippets.schemas import SnippetCreate, SnippetResponse
from app.modules.snippets.service import SnippetService
from app.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/snippets", tags=["snippets"])


def get_snippet_service(supabase: Client = Depends(get_user_supabase)) -> SnippetService:
    return SnippetService(supabase)


@router.get("", response_model=List[SnippetResponse])
async def list_snippets(
    user_data: Dict = Depends(get_current_user_id),
    service: SnippetService = Depends(get_snippet_service)
):
    return service.list_snippets(user_data["id"])


@router.post("", response_model=SnippetResponse, status_code=201)
async def save_snippet(
    snippet_data: SnippetCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: SnippetService = Depends(get_snippet_service)
):
    """Save the editor's code (and its last output) under a title"""
    return service.create_snippet(user_data["id"], snippet_data)


@router.get("/{snippet_id}", response_model=SnippetResponse)
async def get_snippet(
    snippet_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: SnippetService = Depends(get_snippet_service)
):
    return service.get_snippet(snippet_id, user_data["id"])


@router.delete("/{snippet_id}", status_code=204)
async def delete_snippet(
    snippet_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: SnippetService = Depends(get_snippet_service)
):
    service.delete_snippet(snippet_id, user_data["id"])
    return None
