import hashlib
import logging
import time
from supabase import Client
from portal.modules.auth.schemas import (
    SignUpRequest, SignUpResponse, SignInRequest, SessionResponse
)
from portal.config.settings import settings
from fastapi import HTTPException
from typing import Callable, Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

DEFAULT_DISPLAY_NAME = "Current user"


def display_name(user_data: Optional[Dict[str, Any]]) -> str:
    """full_name from metadata, else the local part of the email."""
    if not user_data:
        return DEFAULT_DISPLAY_NAME
    full_name = (user_data.get("user_metadata") or {}).get("full_name")
    if full_name and full_name.strip():
        return full_name.strip()
    email = user_data.get("email") or ""
    local_part = email.split("@")[0]
    return local_part or DEFAULT_DISPLAY_NAME


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


def _user_to_dict(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": user.user_metadata or {},
        "app_metadata": user.app_metadata or {},
        "created_at": user.created_at,
        "updated_at": user.updated_at
    }


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _session_response(self, auth_response, fallback_email: str = "") -> SessionResponse:
        session = auth_response.session
        user_data = _user_to_dict(auth_response.user)
        return SessionResponse(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            token_type="bearer",
            expires_in=session.expires_in,
            user_id=auth_response.user.id,
            email=auth_response.user.email or fallback_email,
            display_name=display_name(user_data)
        )

    def sign_up(self, signup_data: SignUpRequest) -> SignUpResponse:
        """Register a new account; full_name goes into user_metadata"""
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": signup_data.email,
                "password": signup_data.password,
                "options": {
                    "data": {"full_name": signup_data.full_name}
                }
            })
        except Exception as e:
            error_message = str(e)
            logger.error(f"Sign up error: {error_message}")
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=400, detail=f"Sign up failed: {error_message}")

        if not auth_response.user:
            raise HTTPException(status_code=400, detail="Sign up failed")

        # No session means the project requires email confirmation first
        confirmation_required = auth_response.session is None
        message = (
            "Check your email to activate your account"
            if confirmation_required
            else "Account created"
        )
        return SignUpResponse(
            user_id=auth_response.user.id,
            email=auth_response.user.email or signup_data.email,
            confirmation_required=confirmation_required,
            message=message
        )

    def sign_in(self, signin_data: SignInRequest) -> SessionResponse:
        """Password login"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": signin_data.email,
                "password": signin_data.password
            })
        except Exception as e:
            error_message = str(e)
            logger.error(f"Sign in error: {error_message}")
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Sign in failed: {error_message}")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid credentials")
        return self._session_response(auth_response, signin_data.email)

    def refresh_session(self, refresh_token: str) -> SessionResponse:
        try:
            auth_response = self.supabase.auth.refresh_session(refresh_token)
        except Exception as e:
            logger.error(f"Refresh session error: {e}")
            raise HTTPException(status_code=401, detail="Invalid or expired refresh token")
        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid or expired refresh token")
        return self._session_response(auth_response)

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user_data = _user_to_dict(user_response.user)
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def sign_out(self, token: str) -> bool:
        """Sign out; errors are logged and reported as False"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Tokens are stateless JWTs; they stay valid until they expire
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.error(f"Sign out error: {e}")
            return False

    def reset_password(self, email: str) -> None:
        """Send the password reset email with a redirect back to the frontend"""
        redirect_to = f"{settings.frontend_url.rstrip('/')}/reset-password"
        try:
            self.supabase.auth.reset_password_for_email(email, {"redirect_to": redirect_to})
        except Exception as e:
            logger.error(f"Reset password error: {e}")
            raise HTTPException(status_code=400, detail="Password reset request failed")
        logger.info(f"Password reset email requested for {email}")

    def subscribe_auth_events(self, callback: Optional[Callable] = None):
        """Log every sign-in / sign-out the client observes. Returns the subscription."""
        def _log_event(event, session):
            email = session.user.email if session and session.user else None
            logger.info(f"Auth state changed: {event} {email or ''}".rstrip())
            if callback:
                callback(event, session)

        return self.supabase.auth.on_auth_state_change(_log_event)
