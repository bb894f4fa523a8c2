from pydantic import BaseModel
from typing import List

from portal.modules.calendar.schemas import CalendarEntry


class DashboardStats(BaseModel):
    active_tickets: int
    completed_tasks: int
    today_events: int
    pinned_announcements: int
    upcoming_events: List[CalendarEntry]
