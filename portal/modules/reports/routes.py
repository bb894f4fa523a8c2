from fastapi import APIRouter, Depends
from portal.database.supabase_client import get_supabase
from portal.database.local_store import LocalStore, get_local_store
from portal.modules.reports.schemas import ReportRequest, ReportResponse
from portal.modules.reports.service import ReportService
from portal.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/reports", tags=["reports"])


def get_report_service(
    supabase: Client = Depends(get_supabase),
    store: LocalStore = Depends(get_local_store)
) -> ReportService:
    return ReportService(supabase, store)


@router.post("", response_model=ReportResponse, status_code=201)
async def generate_report(
    report_request: ReportRequest,
    user_data: Dict = Depends(get_current_user),
    service: ReportService = Depends(get_report_service)
):
    """Summarise the selected sections over the requested period"""
    return service.generate(report_request)
