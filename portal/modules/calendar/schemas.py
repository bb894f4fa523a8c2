from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, List, Literal
import datetime as dt

from portal.core.validators import require_choice, require_text

EVENT_TYPES = ("meeting", "inspection", "training", "client", "review", "other")


class EventCreate(BaseModel):
    title: str
    date: dt.date
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    type: str = "meeting"
    location: Optional[str] = None
    participants: List[str] = []
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        return require_text(v, "title")

    @field_validator("type")
    @classmethod
    def check_type(cls, v: str) -> str:
        return require_choice(v, "type", EVENT_TYPES)

    @field_validator("participants")
    @classmethod
    def clean_participants(cls, v: List[str]) -> List[str]:
        return [p.strip() for p in v if p and p.strip()]

    @model_validator(mode="after")
    def check_time_range(self):
        if self.start_time is not None and self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self


class CalendarEntry(BaseModel):
    id: str
    title: str
    date: dt.date
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    type: str
    location: Optional[str] = None
    participants: List[str] = []
    description: Optional[str] = None
    source: Literal["event", "ticket", "task"] = "event"


class CalendarDay(BaseModel):
    date: dt.date
    is_current_month: bool
    is_today: bool
    events: List[CalendarEntry]


class CalendarMonth(BaseModel):
    year: int
    month: int
    days: List[CalendarDay]


class CalendarOverview(BaseModel):
    today: List[CalendarEntry]
    upcoming: List[CalendarEntry]
