from fastapi import APIRouter, Depends
from portal.database.supabase_client import get_supabase
from portal.database.local_store import LocalStore, get_local_store
from portal.modules.dashboard.schemas import DashboardStats
from portal.modules.dashboard.service import DashboardService
from portal.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(
    supabase: Client = Depends(get_supabase),
    store: LocalStore = Depends(get_local_store)
) -> DashboardService:
    return DashboardService(supabase, store)


@router.get("", response_model=DashboardStats)
async def get_dashboard(
    user_data: Dict = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service)
):
    return service.stats()
