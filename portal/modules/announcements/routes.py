from fastapi import APIRouter, Depends
from portal.database.supabase_client import get_supabase
from portal.modules.announcements.schemas import (
    AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse
)
from portal.modules.announcements.service import AnnouncementService
from portal.modules.auth.service import display_name
from portal.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/announcements", tags=["announcements"])


def get_announcement_service(supabase: Client = Depends(get_supabase)) -> AnnouncementService:
    return AnnouncementService(supabase)


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(
    search: Optional[str] = None,
    pinned: Optional[bool] = None,
    user_data: Dict = Depends(get_current_user),
    service: AnnouncementService = Depends(get_announcement_service)
):
    """List announcements, pinned first"""
    return service.list_announcements(search=search, pinned=pinned)


@router.post("", response_model=AnnouncementResponse, status_code=201)
async def create_announcement(
    announcement_data: AnnouncementCreate,
    user_data: Dict = Depends(get_current_user),
    service: AnnouncementService = Depends(get_announcement_service)
):
    """Post an announcement; author defaults to the signed-in user"""
    return service.create_announcement(announcement_data, author=display_name(user_data))


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(
    announcement_id: str,
    user_data: Dict = Depends(get_current_user),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return service.get_announcement(announcement_id)


@router.patch("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: str,
    announcement_data: AnnouncementUpdate,
    user_data: Dict = Depends(get_current_user),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return service.update_announcement(announcement_id, announcement_data)


@router.post("/{announcement_id}/pin", response_model=AnnouncementResponse)
async def pin_announcement(
    announcement_id: str,
    user_data: Dict = Depends(get_current_user),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return service.set_pinned(announcement_id, True)


@router.delete("/{announcement_id}/pin", response_model=AnnouncementResponse)
async def unpin_announcement(
    announcement_id: str,
    user_data: Dict = Depends(get_current_user),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return service.set_pinned(announcement_id, False)


@router.delete("/{announcement_id}", status_code=204)
async def delete_announcement(
    announcement_id: str,
    user_data: Dict = Depends(get_current_user),
    service: AnnouncementService = Depends(get_announcement_service)
):
    service.delete_announcement(announcement_id)
    return None
