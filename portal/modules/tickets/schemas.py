from pydantic import BaseModel, field_validator
from typing import Optional, Literal
from datetime import date, datetime

from portal.core.validators import PRIORITIES, require_choice, require_text

TICKET_STATUSES = ("pending", "in_progress", "review", "completed")
ACTIVE_STATUSES = ("pending", "in_progress", "review")
TICKET_CATEGORIES = ("system", "security", "design", "performance", "other")

TicketView = Literal["all", "active", "completed", "overdue"]


class TicketCreate(BaseModel):
    title: str
    description: str
    priority: str
    category: str
    assignee: str
    reporter: Optional[str] = None
    due_date: Optional[date] = None

    @field_validator("title", "description", "assignee")
    @classmethod
    def check_required(cls, v: str, info) -> str:
        return require_text(v, info.field_name)

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v: str) -> str:
        return require_choice(v, "priority", PRIORITIES)

    @field_validator("category")
    @classmethod
    def check_category(cls, v: str) -> str:
        return require_choice(v, "category", TICKET_CATEGORIES)


class TicketUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    assignee: Optional[str] = None
    due_date: Optional[date] = None

    @field_validator("title", "description")
    @classmethod
    def check_not_blank(cls, v: Optional[str], info) -> Optional[str]:
        return v if v is None else require_text(v, info.field_name)

    @field_validator("status")
    @classmethod
    def check_status(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else require_choice(v, "status", TICKET_STATUSES)

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else require_choice(v, "priority", PRIORITIES)

    @field_validator("category")
    @classmethod
    def check_category(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else require_choice(v, "category", TICKET_CATEGORIES)


class TicketUser(BaseModel):
    id: str
    name: str
    email: str


class TicketResponse(BaseModel):
    id: str
    title: str
    description: str
    status: str
    priority: str
    category: str
    assignee_id: Optional[str] = None
    reporter_id: Optional[str] = None
    assignee: Optional[TicketUser] = None
    reporter: Optional[TicketUser] = None
    due_date: Optional[date] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
