from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from portal.core.validators import PRIORITIES, require_choice, require_text


class AnnouncementCreate(BaseModel):
    title: str
    content: str
    author: Optional[str] = None
    priority: str = "medium"
    is_pinned: bool = False

    @field_validator("title", "content")
    @classmethod
    def check_required(cls, v: str, info) -> str:
        return require_text(v, info.field_name)

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v: str) -> str:
        return require_choice(v, "priority", PRIORITIES)


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    priority: Optional[str] = None
    is_pinned: Optional[bool] = None

    @field_validator("title", "content")
    @classmethod
    def check_not_blank(cls, v: Optional[str], info) -> Optional[str]:
        return v if v is None else require_text(v, info.field_name)

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else require_choice(v, "priority", PRIORITIES)


class AnnouncementResponse(BaseModel):
    id: str
    title: str
    content: str
    author: str
    priority: str = "medium"
    is_pinned: bool = False
    created_at: datetime

    class Config:
        from_attributes = True
