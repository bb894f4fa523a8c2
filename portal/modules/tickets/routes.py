from fastapi import APIRouter, Depends
from portal.database.supabase_client import get_supabase
from portal.modules.tickets.schemas import TicketCreate, TicketUpdate, TicketResponse, TicketView
from portal.modules.tickets.service import TicketService
from portal.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/tickets", tags=["tickets"])


def get_ticket_service(supabase: Client = Depends(get_supabase)) -> TicketService:
    return TicketService(supabase)


@router.get("", response_model=List[TicketResponse])
async def list_tickets(
    search: Optional[str] = None,
    view: TicketView = "all",
    user_data: Dict = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    """List tickets with assignee/reporter attached. `view`: all, active, completed, overdue"""
    return service.list_tickets(search=search, view=view)


# Sync handler: user verification may sleep, so let FastAPI run it in the threadpool
@router.post("", response_model=TicketResponse, status_code=201)
def create_ticket(
    ticket_data: TicketCreate,
    user_data: Dict = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    """Create a ticket; unknown assignee/reporter names become new users"""
    return service.create_ticket(ticket_data, user_data)


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(
    ticket_id: str,
    user_data: Dict = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    return service.get_ticket(ticket_id)


@router.patch("/{ticket_id}", response_model=TicketResponse)
def update_ticket(
    ticket_id: str,
    ticket_data: TicketUpdate,
    user_data: Dict = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    return service.update_ticket(ticket_id, ticket_data)


@router.delete("/{ticket_id}", status_code=204)
async def delete_ticket(
    ticket_id: str,
    user_data: Dict = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    service.delete_ticket(ticket_id)
    return None
