from supabase import Client
from portal.modules.announcements.schemas import (
    AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse
)
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class AnnouncementService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_announcements(
        self,
        search: Optional[str] = None,
        pinned: Optional[bool] = None
    ) -> List[AnnouncementResponse]:
        """Pinned announcements first, each group newest first"""
        try:
            result = self.supabase.table("announcements")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching announcements: {e}")
            raise HTTPException(status_code=500, detail="Failed to load announcements")

        announcements = [AnnouncementResponse(**a) for a in result.data or []]
        if search and search.strip():
            term = search.strip().lower()
            announcements = [
                a for a in announcements
                if term in a.title.lower() or term in a.content.lower()
            ]
        if pinned is not None:
            announcements = [a for a in announcements if a.is_pinned == pinned]
        # sorted() is stable, so created_at order survives within each group
        return sorted(announcements, key=lambda a: not a.is_pinned)

    def get_announcement(self, announcement_id: str) -> AnnouncementResponse:
        try:
            result = self.supabase.table("announcements")\
                .select("*")\
                .eq("id", announcement_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching announcement {announcement_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load announcement")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Announcement not found")
        return AnnouncementResponse(**result.data)

    def create_announcement(self, announcement_data: AnnouncementCreate, author: str) -> AnnouncementResponse:
        try:
            result = self.supabase.table("announcements").insert({
                "title": announcement_data.title,
                "content": announcement_data.content,
                "author": (announcement_data.author or "").strip() or author,
                "priority": announcement_data.priority,
                "is_pinned": announcement_data.is_pinned
            }).execute()
        except Exception as e:
            logger.error(f"Error creating announcement: {e}")
            raise HTTPException(status_code=500, detail="Failed to create announcement")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create announcement")
        return AnnouncementResponse(**result.data[0])

    def update_announcement(self, announcement_id: str, announcement_data: AnnouncementUpdate) -> AnnouncementResponse:
        update_data = {
            k: v for k, v in announcement_data.model_dump(exclude_unset=True).items() if v is not None
        }
        if not update_data:
            return self.get_announcement(announcement_id)
        try:
            result = self.supabase.table("announcements")\
                .update(update_data)\
                .eq("id", announcement_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating announcement {announcement_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update announcement")
        if not result.data:
            raise HTTPException(status_code=404, detail="Announcement not found")
        return AnnouncementResponse(**result.data[0])

    def set_pinned(self, announcement_id: str, is_pinned: bool) -> AnnouncementResponse:
        return self.update_announcement(announcement_id, AnnouncementUpdate(is_pinned=is_pinned))

    def delete_announcement(self, announcement_id: str) -> bool:
        try:
            result = self.supabase.table("announcements")\
                .delete()\
                .eq("id", announcement_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting announcement {announcement_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete announcement")
        if not result.data:
            raise HTTPException(status_code=404, detail="Announcement not found")
        return True
