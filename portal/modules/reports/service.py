from supabase import Client
from portal.database.local_store import LocalStore
from portal.modules.reports.schemas import ReportRequest, ReportResponse
from portal.modules.documents.service import DocumentService
from portal.modules.announcements.service import AnnouncementService
from portal.modules.calendar.service import CalendarService
from datetime import date, datetime, timezone
import logging

logger = logging.getLogger(__name__)


def _in_period(value: datetime, start: date, end: date) -> bool:
    return start <= value.date() <= end


class ReportService:
    """Builds report summaries; rendering to the requested format happens client side."""

    def __init__(self, supabase: Client, store: LocalStore):
        self.supabase = supabase
        self.store = store

    def generate(self, request: ReportRequest) -> ReportResponse:
        start, end = request.start_date, request.end_date
        sections = {}
        if request.include_documents:
            documents = DocumentService(self.supabase).list_documents()
            sections["documents"] = sum(1 for d in documents if _in_period(d.created_at, start, end))
        if request.include_calendar:
            entries = CalendarService(self.store, self.supabase).list_entries(start=start, end=end)
            sections["calendar"] = len(entries)
        if request.include_announcements:
            announcements = AnnouncementService(self.supabase).list_announcements()
            sections["announcements"] = sum(1 for a in announcements if _in_period(a.created_at, start, end))

        report = ReportResponse(
            title=request.title,
            type=request.type,
            period=f"{start.isoformat()} ~ {end.isoformat()}",
            includes={
                "documents": request.include_documents,
                "calendar": request.include_calendar,
                "announcements": request.include_announcements,
            },
            format=request.format,
            generated_at=datetime.now(timezone.utc),
            sections=sections
        )
        logger.info(f"Generated {report.type} report '{report.title}' for {report.period}")
        return report
