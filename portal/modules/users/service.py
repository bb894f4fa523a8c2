from supabase import Client
from portal.modules.users.schemas import UserCreate, UserResponse, UserCreateResponse
from portal.database.supabase_client import SupabaseClient
from portal.config import settings
from typing import List, Optional
from fastapi import HTTPException
import logging
import re
import time

logger = logging.getLogger(__name__)


def placeholder_email(name: str, domain: str) -> str:
    """Derive a stable email for a user that only exists as a name, e.g. "Kim Dev" -> kim.dev@<domain>."""
    local = re.sub(r"\s+", ".", name.strip().lower())
    local = "".join(
        ch if ch.isascii() and (ch.isalnum() or ch in "._-") else f"{ord(ch):x}"
        for ch in local
    )
    return f"{local.strip('.') or 'user'}@{domain}"


def matches_search(user: UserResponse, search: str) -> bool:
    term = search.lower()
    return term in user.name.lower() or term in user.email.lower()


class UserService:
    def __init__(
        self,
        supabase: Client,
        verify_inserts: Optional[bool] = None,
        verify_delay: Optional[float] = None,
        placeholder_domain: Optional[str] = None
    ):
        self.supabase = supabase
        self.verify_inserts = settings.verify_user_inserts if verify_inserts is None else verify_inserts
        self.verify_delay = settings.user_verify_delay_seconds if verify_delay is None else verify_delay
        self.placeholder_domain = placeholder_domain or settings.placeholder_email_domain

    def list_users(self, search: Optional[str] = None) -> List[UserResponse]:
        """List users, newest first, optionally filtered by name/email substring"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching users: {e}")
            raise HTTPException(status_code=500, detail="Failed to load users")

        users = [UserResponse(**user) for user in result.data or []]
        if search and search.strip():
            users = [u for u in users if matches_search(u, search.strip())]
        return users

    def get_user_by_id(self, user_id: str) -> UserResponse:
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load user")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        return UserResponse(**result.data)

    def get_users_by_ids(self, user_ids: List[str]) -> List[UserResponse]:
        if not user_ids:
            return []
        result = self.supabase.table("users")\
            .select("*")\
            .in_("id", user_ids)\
            .execute()
        return [UserResponse(**user) for user in result.data or []]

    def get_user_by_email(self, email: str) -> Optional[UserResponse]:
        result = self.supabase.table("users")\
            .select("*")\
            .eq("email", email)\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return UserResponse(**result.data[0])

    def create_user(self, user_data: UserCreate) -> UserCreateResponse:
        """Create a user; an existing user with the same email is returned instead"""
        try:
            existing = self.get_user_by_email(user_data.email)
            if existing:
                return UserCreateResponse(user=existing, created=False, message="Email already exists")

            result = self.supabase.table("users").insert({
                "name": user_data.name,
                "email": user_data.email
            }).execute()
        except Exception as e:
            logger.error(f"Error creating user: {e}")
            raise HTTPException(status_code=500, detail="Failed to create user")

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create user")
        logger.info(f"Created user {result.data[0]['id']} ({user_data.email})")
        return UserCreateResponse(user=UserResponse(**result.data[0]), created=True, message="User created")

    def delete_user(self, user_id: str) -> bool:
        """Delete user row; the linked auth account is removed when a service role key is configured"""
        user = self.get_user_by_id(user_id)
        try:
            result = self.supabase.table("users")\
                .delete()\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete user")

        if user.auth_id and settings.supabase_service_role_key:
            try:
                SupabaseClient.get_service_client().auth.admin.delete_user(user.auth_id)
            except Exception as e:
                logger.warning(f"Failed to delete auth account {user.auth_id}: {e}")
        return len(result.data or []) > 0

    def find_user_id_by_name(self, name: str) -> Optional[str]:
        result = self.supabase.table("users")\
            .select("id")\
            .eq("name", name)\
            .limit(1)\
            .execute()
        if result.data:
            return result.data[0]["id"]
        return None

    def _free_placeholder_email(self, name: str) -> str:
        """Placeholder email for `name`; names that differ only in case or spacing get .2, .3, ..."""
        email = placeholder_email(name, self.placeholder_domain)
        local, domain = email.rsplit("@", 1)
        suffix = 2
        while self.get_user_by_email(email):
            email = f"{local}.{suffix}@{domain}"
            suffix += 1
        return email

    def find_or_create_by_name(self, name: str, email: Optional[str] = None) -> str:
        """
        Resolve a user name to an id. On miss, insert a user with the given email
        (or a placeholder derived from the name) and, when verification is on,
        re-read the row once after a short delay before returning its id.
        Raises HTTPException if any step fails.
        """
        name = name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="User name is required")
        try:
            user_id = self.find_user_id_by_name(name)
            if user_id:
                return user_id

            # A different user may already own the email; fall back to the placeholder
            if email and self.get_user_by_email(email):
                email = None
            email = email or self._free_placeholder_email(name)
            insert_result = self.supabase.table("users").insert({
                "name": name,
                "email": email
            }).execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error resolving user '{name}': {e}")
            raise HTTPException(status_code=500, detail=f"Failed to resolve user '{name}'")

        if not insert_result.data:
            raise HTTPException(status_code=500, detail=f"Failed to create user '{name}'")
        user_id = insert_result.data[0]["id"]
        logger.info(f"Created user {user_id} for name '{name}' <{email}>")

        if self.verify_inserts:
            if self.verify_delay > 0:
                time.sleep(self.verify_delay)
            try:
                check = self.supabase.table("users")\
                    .select("id")\
                    .eq("id", user_id)\
                    .limit(1)\
                    .execute()
            except Exception as e:
                logger.error(f"Error verifying user {user_id}: {e}")
                raise HTTPException(status_code=500, detail=f"Failed to verify user '{name}'")
            if not check.data:
                raise HTTPException(status_code=500, detail=f"User '{name}' was not persisted")
        return user_id
