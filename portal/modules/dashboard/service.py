from supabase import Client
from portal.database.local_store import LocalStore
from portal.modules.dashboard.schemas import DashboardStats
from portal.modules.tickets.service import TicketService
from portal.modules.tasks.service import TaskService
from portal.modules.announcements.service import AnnouncementService
from portal.modules.calendar.service import CalendarService
from typing import Optional
from datetime import date

UPCOMING_ON_DASHBOARD = 3


class DashboardService:
    def __init__(self, supabase: Client, store: LocalStore):
        self.supabase = supabase
        self.store = store

    def stats(self, today: Optional[date] = None) -> DashboardStats:
        today = today or date.today()
        active_tickets = TicketService(self.supabase).list_tickets(view="active", today=today)
        completed_tasks = TaskService(self.store).list_tasks(status="completed")
        pinned = AnnouncementService(self.supabase).list_announcements(pinned=True)
        overview = CalendarService(self.store, self.supabase).overview(today=today)
        return DashboardStats(
            active_tickets=len(active_tickets),
            completed_tasks=len(completed_tasks),
            today_events=len(overview.today),
            pinned_announcements=len(pinned),
            upcoming_events=overview.upcoming[:UPCOMING_ON_DASHBOARD]
        )
