from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase, get_service_supabase
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, MeResponse
)
from app.modules.auth.service import AuthService
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_access_token, get_current_user_id, get_user_supabase
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_registration_service(
    supabase: Client = Depends(get_supabase),
    service_supabase: Client = Depends(get_service_supabase)
) -> AuthService:
    # The new user has no session yet, so the profile row is written with the service client
    return AuthService(supabase, ProfileService(service_supabase))


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_registration_service)
):
    """Register a new user with a username and avatar"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_access_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_user_supabase)
):
    """Get current authenticated user and their profile (profile may not exist yet)"""
    profile = ProfileService(supabase).find_profile(current_user["id"])
    return MeResponse(id=current_user["id"], email=current_user.get("email"), profile=profile)
