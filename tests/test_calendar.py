from datetime import date, time, timedelta

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from portal.modules.calendar.schemas import EventCreate
from portal.modules.calendar.service import CalendarService, month_grid_start

TODAY = date(2026, 10, 19)


def _event(day, title="Standup", start=None, end=None):
    return EventCreate(title=title, date=day, start_time=start, end_time=end)


def test_grid_starts_on_sunday_before_first():
    assert month_grid_start(2026, 10) == date(2026, 9, 27)
    assert month_grid_start(2026, 2) == date(2026, 2, 1)


def test_end_time_before_start_time_rejected():
    with pytest.raises(ValidationError):
        _event(TODAY, start=time(10, 0), end=time(9, 0))
    assert _event(TODAY, start=time(9, 0), end=time(9, 0)).end_time == time(9, 0)


def test_event_type_must_be_known():
    with pytest.raises(ValidationError):
        EventCreate(title="Party", date=TODAY, type="party")


def test_entries_sorted_by_date_then_time(store):
    service = CalendarService(store)
    service.create_event(_event(TODAY, "Lunch", start=time(12, 0)))
    service.create_event(_event(TODAY, "Standup", start=time(9, 0)))
    service.create_event(_event(TODAY, "Holiday"))
    service.create_event(_event(TODAY - timedelta(days=1), "Review"))

    titles = [e.title for e in service.list_entries(include_deadlines=False)]
    assert titles == ["Review", "Holiday", "Standup", "Lunch"]


def test_deadlines_from_open_tasks_and_tickets(store, fake_supabase):
    fake_supabase.seed("tickets", [
        {"id": "t1", "title": "VPN", "description": "", "status": "pending", "priority": "high",
         "category": "system", "due_date": "2026-10-21"},
        {"id": "t2", "title": "Done", "description": "", "status": "completed", "priority": "low",
         "category": "other", "due_date": "2026-10-21"},
    ])
    service = CalendarService(store, fake_supabase)

    deadlines = [e for e in service.list_entries() if e.type == "deadline"]

    assert {e.id for e in deadlines} == {"ticket-t1", "task-1", "task-2"}
    assert {e.source for e in deadlines} == {"ticket", "task"}


def test_month_view_grid(store):
    service = CalendarService(store)
    service.create_event(_event(date(2026, 10, 1), "Kickoff"))
    service.create_event(_event(date(2026, 11, 8), "Outside grid"))

    month = service.month_view(2026, 10, today=TODAY, include_deadlines=False)

    assert len(month.days) == 42
    assert month.days[0].date == date(2026, 9, 27)
    assert month.days[0].is_current_month is False
    assert [d.date for d in month.days if d.is_today] == [TODAY]
    first = next(d for d in month.days if d.date == date(2026, 10, 1))
    assert [e.title for e in first.events] == ["Kickoff"]
    assert all(e.title != "Outside grid" for d in month.days for e in d.events)


def test_month_out_of_range(store):
    with pytest.raises(HTTPException) as exc:
        CalendarService(store).month_view(2026, 13)
    assert exc.value.status_code == 400


def test_overview_today_and_upcoming(store):
    service = CalendarService(store)
    service.create_event(_event(TODAY, "Today"))
    service.create_event(_event(TODAY + timedelta(days=2), "Later"))
    service.create_event(_event(TODAY - timedelta(days=2), "Past"))

    overview = service.overview(today=TODAY, include_deadlines=False)

    assert [e.title for e in overview.today] == ["Today"]
    assert [e.title for e in overview.upcoming] == ["Later"]


def test_calendar_routes(client):
    created = client.post("/api/v1/calendar/events", json={
        "title": "Inspection", "date": "2026-10-20", "type": "inspection",
        "start_time": "10:00", "end_time": "11:00", "participants": ["Kim Dev", " "],
    })
    assert created.status_code == 201
    event = created.json()
    assert event["participants"] == ["Kim Dev"]
    assert event["source"] == "event"

    listed = client.get("/api/v1/calendar/events", params={
        "start": "2026-10-20", "end": "2026-10-20", "include_deadlines": False
    }).json()
    assert [e["id"] for e in listed] == [event["id"]]

    assert client.get("/api/v1/calendar/month", params={"year": 2026, "month": 13}).status_code == 400
    assert len(client.get("/api/v1/calendar/month", params={"year": 2026, "month": 10}).json()["days"]) == 42

    assert client.delete(f"/api/v1/calendar/events/{event['id']}").status_code == 204
    assert client.delete(f"/api/v1/calendar/events/{event['id']}").status_code == 404


def test_calendar_route_rejects_inverted_times(client):
    response = client.post("/api/v1/calendar/events", json={
        "title": "Inspection", "date": "2026-10-20", "start_time": "11:00", "end_time": "10:00"
    })
    assert response.status_code == 422


@pytest.mark.parametrize("year, month", [(1, 1), (9999, 12)])
def test_month_at_calendar_limits_is_400(store, year, month):
    with pytest.raises(HTTPException) as exc:
        CalendarService(store).month_view(year, month, include_deadlines=False)
    assert exc.value.status_code == 400


def test_month_route_bounds_year(client):
    assert client.get("/api/v1/calendar/month", params={"year": 0, "month": 1}).status_code == 422
    assert client.get("/api/v1/calendar/month", params={"year": 10000, "month": 1}).status_code == 422
    assert client.get("/api/v1/calendar/month", params={"year": 1, "month": 1}).status_code == 400
