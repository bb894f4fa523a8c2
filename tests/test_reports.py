from datetime import date

import pytest
from pydantic import ValidationError

from portal.modules.calendar.schemas import EventCreate
from portal.modules.calendar.service import CalendarService
from portal.modules.reports.schemas import ReportRequest

REPORT = {
    "title": "January summary",
    "type": "monthly",
    "start_date": "2026-01-01",
    "end_date": "2026-01-31",
    "format": "excel",
}


@pytest.mark.parametrize("end_date", ["2026-01-01", "2025-12-31"])
def test_end_date_must_follow_start_date(end_date):
    with pytest.raises(ValidationError):
        ReportRequest(**{**REPORT, "end_date": end_date})


def test_dates_are_required():
    with pytest.raises(ValidationError):
        ReportRequest(title="Summary", type="weekly")


def test_unknown_type_and_format_rejected():
    with pytest.raises(ValidationError):
        ReportRequest(**{**REPORT, "type": "daily"})
    with pytest.raises(ValidationError):
        ReportRequest(**{**REPORT, "format": "csv"})


def test_report_counts_items_in_period(client, fake_supabase, store):
    fake_supabase.seed("documents", [
        {"name": "in.pdf", "type": "pdf", "size": "1 KB", "modified_by": "Hong",
         "created_at": "2026-01-10T08:00:00+00:00"},
        {"name": "out.pdf", "type": "pdf", "size": "1 KB", "modified_by": "Hong",
         "created_at": "2026-03-01T08:00:00+00:00"},
    ])
    fake_supabase.seed("announcements", [
        {"title": "Jan", "content": "x", "author": "HR", "created_at": "2026-01-31T23:00:00+00:00"},
        {"title": "Feb", "content": "x", "author": "HR", "created_at": "2026-02-01T01:00:00+00:00"},
    ])
    CalendarService(store).create_event(EventCreate(title="Kickoff", date=date(2026, 1, 5)))
    CalendarService(store).create_event(EventCreate(title="Later", date=date(2026, 2, 5)))

    response = client.post("/api/v1/reports", json={
        **REPORT,
        "include_documents": True,
        "include_calendar": True,
        "include_announcements": True,
    })

    assert response.status_code == 201
    report = response.json()
    assert report["period"] == "2026-01-01 ~ 2026-01-31"
    assert report["format"] == "excel"
    assert report["includes"] == {"documents": True, "calendar": True, "announcements": True}
    assert report["sections"] == {"documents": 1, "calendar": 1, "announcements": 1}


def test_report_only_includes_selected_sections(client):
    response = client.post("/api/v1/reports", json={**REPORT, "include_documents": True})

    assert response.status_code == 201
    assert response.json()["sections"] == {"documents": 0}
    assert response.json()["includes"]["calendar"] is False


def test_report_route_rejects_inverted_period(client):
    response = client.post("/api/v1/reports", json={**REPORT, "end_date": "2025-12-01"})
    assert response.status_code == 422
