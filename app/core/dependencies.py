"""
Core dependencies for route protection.

Authorization itself lives in the database's row-level-security policies;
these dependencies resolve who is calling and hand services a Supabase client
that acts as that user.
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import SupabaseClient, get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_access_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_access_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_user_supabase(
    token: str = Depends(get_access_token),
    user_data: dict = Depends(get_current_user_id)
) -> Client:
    """Supabase client scoped to the authenticated caller (RLS enforced server-side)."""
    logger.debug(f"Creating user-scoped client for {user_data['id']}")
    return SupabaseClient.get_user_client(token)
