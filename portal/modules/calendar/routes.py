from fastapi import APIRouter, Depends, Query
from portal.database.supabase_client import get_supabase
from portal.database.local_store import LocalStore, get_local_store
from portal.modules.calendar.schemas import EventCreate, CalendarEntry, CalendarMonth, CalendarOverview
from portal.modules.calendar.service import CalendarService
from portal.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict, Optional
from datetime import date

router = APIRouter(prefix="/calendar", tags=["calendar"])


def get_calendar_service(
    store: LocalStore = Depends(get_local_store),
    supabase: Client = Depends(get_supabase)
) -> CalendarService:
    return CalendarService(store, supabase)


@router.get("/events", response_model=List[CalendarEntry])
async def list_events(
    start: Optional[date] = None,
    end: Optional[date] = None,
    include_deadlines: bool = True,
    user_data: Dict = Depends(get_current_user),
    service: CalendarService = Depends(get_calendar_service)
):
    """Events plus ticket/task deadlines between `start` and `end` (inclusive)"""
    return service.list_entries(start=start, end=end, include_deadlines=include_deadlines)


@router.post("/events", response_model=CalendarEntry, status_code=201)
async def create_event(
    event_data: EventCreate,
    user_data: Dict = Depends(get_current_user),
    service: CalendarService = Depends(get_calendar_service)
):
    return service.create_event(event_data)


@router.delete("/events/{event_id}", status_code=204)
async def delete_event(
    event_id: str,
    user_data: Dict = Depends(get_current_user),
    service: CalendarService = Depends(get_calendar_service)
):
    service.delete_event(event_id)
    return None


@router.get("/month", response_model=CalendarMonth)
async def month_view(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = None,
    include_deadlines: bool = True,
    user_data: Dict = Depends(get_current_user),
    service: CalendarService = Depends(get_calendar_service)
):
    """42-day grid for the month; defaults to the current month"""
    today = date.today()
    return service.month_view(
        today.year if year is None else year,
        today.month if month is None else month,
        include_deadlines=include_deadlines
    )


@router.get("/overview", response_model=CalendarOverview)
async def overview(
    user_data: Dict = Depends(get_current_user),
    service: CalendarService = Depends(get_calendar_service)
):
    """Today's entries and the next upcoming ones"""
    return service.overview()
