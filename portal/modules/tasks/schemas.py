from pydantic import BaseModel, field_validator
from typing import Optional, Literal
from datetime import date

from portal.core.validators import PRIORITIES, require_choice, require_text

TaskStatus = Literal["pending", "in_progress", "completed"]
TaskPriority = Literal["high", "medium", "low"]
TASK_CATEGORIES = ("development", "planning", "maintenance", "design", "other")


class TaskCreate(BaseModel):
    title: str
    description: str
    priority: str
    category: str
    assignee: Optional[str] = None
    due_date: Optional[date] = None
    status: TaskStatus = "pending"

    @field_validator("title", "description")
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
        return require_choice(v, "category", TASK_CATEGORIES)

    @field_validator("assignee")
    @classmethod
    def blank_assignee_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v and v.strip() else None


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    category: Optional[str] = None
    assignee: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[TaskStatus] = None

    @field_validator("title", "description")
    @classmethod
    def check_not_blank(cls, v: Optional[str], info) -> Optional[str]:
        return v if v is None else require_text(v, info.field_name)

    @field_validator("category")
    @classmethod
    def check_category(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else require_choice(v, "category", TASK_CATEGORIES)


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskResponse(BaseModel):
    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    assignee: Optional[str] = None
    due_date: Optional[date] = None
    category: str
    created_at: str
    updated_at: str
