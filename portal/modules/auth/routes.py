from fastapi import APIRouter, Depends
from portal.modules.auth.schemas import (
    SignUpRequest, SignUpResponse, SignInRequest, SessionResponse,
    RefreshRequest, PasswordResetRequest, CurrentUserResponse
)
from portal.modules.auth.service import AuthService, display_name
from portal.core.dependencies import get_auth_service, get_current_token, get_current_user
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=SignUpResponse, status_code=201)
async def sign_up(
    signup_data: SignUpRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new account"""
    return service.sign_up(signup_data)


@router.post("/login", response_model=SessionResponse)
async def sign_in(
    signin_data: SignInRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access + refresh tokens"""
    return service.sign_in(signin_data)


@router.post("/refresh", response_model=SessionResponse)
async def refresh(
    refresh_data: RefreshRequest,
    service: AuthService = Depends(get_auth_service)
):
    return service.refresh_session(refresh_data.refresh_token)


@router.post("/logout", status_code=200)
async def sign_out(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout; the client should drop its tokens regardless of the outcome"""
    if not service.sign_out(token):
        return {"message": "Sign out failed on the server; local session cleared"}
    return {"message": "Logged out successfully"}


@router.post("/reset-password", status_code=202)
async def reset_password(
    reset_data: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a password reset link to the given email"""
    service.reset_password(reset_data.email)
    return {"message": f"Password reset link sent to {reset_data.email}"}


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(current_user: Dict = Depends(get_current_user)):
    """Current session's user"""
    return CurrentUserResponse(
        id=current_user["id"],
        email=current_user.get("email"),
        display_name=display_name(current_user),
        user_metadata=current_user.get("user_metadata") or {},
        created_at=current_user.get("created_at")
    )
