from fastapi import APIRouter, Depends, Response
from portal.database.supabase_client import get_supabase
from portal.modules.users.schemas import UserCreate, UserResponse, UserCreateResponse
from portal.modules.users.service import UserService
from portal.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("", response_model=List[UserResponse])
async def list_users(
    search: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """List users, newest first. `search` matches name or email."""
    return service.list_users(search=search)


@router.post("", response_model=UserCreateResponse)
async def create_user(
    user_body: UserCreate,
    response: Response,
    user_data: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Create a user; returns the existing user (200) when the email is taken"""
    result = service.create_user(user_body)
    response.status_code = 201 if result.created else 200
    return result


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    user_data: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    return service.get_user_by_id(user_id)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    user_data: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    service.delete_user(user_id)
    return None
