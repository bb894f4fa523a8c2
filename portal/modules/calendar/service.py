from supabase import Client
from portal.database.local_store import LocalStore
from portal.modules.calendar.schemas import (
    EventCreate, CalendarEntry, CalendarDay, CalendarMonth, CalendarOverview
)
from portal.modules.tickets.service import TicketService
from portal.modules.tasks.service import TaskService
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import date, time, timedelta
import json
import logging
import uuid

logger = logging.getLogger(__name__)

EVENTS_KEY = "dr-help-events"
GRID_DAYS = 42
UPCOMING_LIMIT = 10


def month_grid_start(year: int, month: int) -> date:
    """Sunday on or before the first day of the month"""
    first = date(year, month, 1)
    return first - timedelta(days=(first.weekday() + 1) % 7)


def _sort_key(entry: CalendarEntry):
    return (entry.date, entry.start_time or time.min)


class CalendarService:
    def __init__(self, store: LocalStore, supabase: Optional[Client] = None):
        self.store = store
        self.supabase = supabase

    def _load_events(self) -> List[Dict[str, Any]]:
        try:
            saved = self.store.get_item(EVENTS_KEY)
            return json.loads(saved) if saved else []
        except Exception as e:
            logger.error(f"Error loading events: {e}")
            raise HTTPException(status_code=500, detail="Failed to load events")

    def _save_events(self, events: List[Dict[str, Any]]) -> None:
        try:
            self.store.set_item(EVENTS_KEY, json.dumps(events, ensure_ascii=False))
        except Exception as e:
            logger.error(f"Error saving events: {e}")
            raise HTTPException(status_code=500, detail="Failed to save events")

    def create_event(self, event_data: EventCreate) -> CalendarEntry:
        event = CalendarEntry(id=str(uuid.uuid4()), **event_data.model_dump())
        events = self._load_events()
        events.append(event.model_dump(mode="json", exclude={"source"}))
        self._save_events(events)
        logger.info(f"Created event {event.id} on {event.date}")
        return event

    def delete_event(self, event_id: str) -> bool:
        events = self._load_events()
        remaining = [e for e in events if e["id"] != event_id]
        if len(remaining) == len(events):
            raise HTTPException(status_code=404, detail="Event not found")
        self._save_events(remaining)
        return True

    def _deadlines(self) -> List[CalendarEntry]:
        """Ticket and task due dates as all-day entries"""
        entries = []
        if self.supabase is not None:
            for ticket in TicketService(self.supabase).list_tickets():
                if ticket.due_date and ticket.status != "completed":
                    entries.append(CalendarEntry(
                        id=f"ticket-{ticket.id}",
                        title=ticket.title,
                        date=ticket.due_date,
                        type="deadline",
                        participants=[ticket.assignee.name] if ticket.assignee else [],
                        source="ticket"
                    ))
        for task in TaskService(self.store).list_tasks():
            if task.due_date and task.status != "completed":
                entries.append(CalendarEntry(
                    id=f"task-{task.id}",
                    title=task.title,
                    date=task.due_date,
                    type="deadline",
                    participants=[task.assignee] if task.assignee else [],
                    source="task"
                ))
        return entries

    def list_entries(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        include_deadlines: bool = True
    ) -> List[CalendarEntry]:
        """All entries sorted by date then start time; all-day entries first within a day"""
        entries = [CalendarEntry(**e) for e in self._load_events()]
        if include_deadlines:
            entries.extend(self._deadlines())
        if start:
            entries = [e for e in entries if e.date >= start]
        if end:
            entries = [e for e in entries if e.date <= end]
        return sorted(entries, key=_sort_key)

    def month_view(
        self,
        year: int,
        month: int,
        today: Optional[date] = None,
        include_deadlines: bool = True
    ) -> CalendarMonth:
        """Six-week grid starting on the Sunday before the 1st"""
        if not 1 <= month <= 12:
            raise HTTPException(status_code=400, detail="month must be between 1 and 12")
        today = today or date.today()
        try:
            start = month_grid_start(year, month)
            end = start + timedelta(days=GRID_DAYS - 1)
        except (ValueError, OverflowError):
            raise HTTPException(status_code=400, detail=f"No calendar grid for {year}-{month:02d}")
        by_date: Dict[date, List[CalendarEntry]] = {}
        for entry in self.list_entries(start, end, include_deadlines):
            by_date.setdefault(entry.date, []).append(entry)

        days = []
        for offset in range(GRID_DAYS):
            day = start + timedelta(days=offset)
            days.append(CalendarDay(
                date=day,
                is_current_month=day.month == month,
                is_today=day == today,
                events=by_date.get(day, [])
            ))
        return CalendarMonth(year=year, month=month, days=days)

    def overview(self, today: Optional[date] = None, include_deadlines: bool = True) -> CalendarOverview:
        today = today or date.today()
        entries = self.list_entries(start=today, include_deadlines=include_deadlines)
        return CalendarOverview(
            today=[e for e in entries if e.date == today],
            upcoming=[e for e in entries if e.date > today][:UPCOMING_LIMIT]
        )
