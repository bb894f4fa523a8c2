from supabase import Client
from portal.modules.tickets.schemas import TicketCreate, TicketUpdate, TicketResponse, TicketUser
from portal.modules.tickets.filters import filter_tickets
from portal.modules.users.service import UserService
from portal.modules.auth.service import display_name
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import date, datetime, timedelta, timezone
import logging

logger = logging.getLogger(__name__)

INITIAL_STATUS = "pending"
DEFAULT_DUE_DAYS = 7


class TicketService:
    def __init__(self, supabase: Client, user_service: Optional[UserService] = None):
        self.supabase = supabase
        self.user_service = user_service or UserService(supabase)

    def _attach_users(self, rows: List[Dict[str, Any]]) -> List[TicketResponse]:
        """Fetch referenced users in one query and attach them to each ticket by id"""
        user_ids = set()
        for row in rows:
            if row.get("assignee_id"):
                user_ids.add(row["assignee_id"])
            if row.get("reporter_id"):
                user_ids.add(row["reporter_id"])
        users = {u.id: u for u in self.user_service.get_users_by_ids(sorted(user_ids))}

        tickets = []
        for row in rows:
            ticket = TicketResponse(**row)
            assignee = users.get(row.get("assignee_id"))
            reporter = users.get(row.get("reporter_id"))
            if assignee:
                ticket.assignee = TicketUser(id=assignee.id, name=assignee.name, email=assignee.email)
            if reporter:
                ticket.reporter = TicketUser(id=reporter.id, name=reporter.name, email=reporter.email)
            tickets.append(ticket)
        return tickets

    def create_ticket(self, ticket_data: TicketCreate, current_user: Dict[str, Any]) -> TicketResponse:
        """
        Resolve assignee, then reporter (explicit name or the signed-in user),
        then insert the ticket. Steps run one after another; a failure aborts
        without undoing users created by earlier steps.
        """
        try:
            assignee_id = self.user_service.find_or_create_by_name(ticket_data.assignee)
            if ticket_data.reporter and ticket_data.reporter.strip():
                reporter_id = self.user_service.find_or_create_by_name(ticket_data.reporter)
            else:
                reporter_id = self.user_service.find_or_create_by_name(
                    display_name(current_user), email=current_user.get("email")
                )

            due_date = ticket_data.due_date or (date.today() + timedelta(days=DEFAULT_DUE_DAYS))
            result = self.supabase.table("tickets").insert({
                "title": ticket_data.title,
                "description": ticket_data.description,
                "priority": ticket_data.priority,
                "category": ticket_data.category,
                "status": INITIAL_STATUS,
                "assignee_id": assignee_id,
                "reporter_id": reporter_id,
                "due_date": due_date.isoformat()
            }).execute()
        except HTTPException as e:
            logger.error(f"Ticket creation aborted: {e.detail}")
            raise HTTPException(status_code=e.status_code, detail="Failed to create ticket")
        except Exception as e:
            logger.error(f"Error creating ticket: {e}")
            raise HTTPException(status_code=500, detail="Failed to create ticket")

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create ticket")
        logger.info(f"Created ticket {result.data[0]['id']} assigned to {assignee_id}")
        return self._attach_users(result.data)[0]

    def list_tickets(
        self,
        search: Optional[str] = None,
        view: str = "all",
        today: Optional[date] = None
    ) -> List[TicketResponse]:
        try:
            result = self.supabase.table("tickets")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
            tickets = self._attach_users(result.data or [])
        except Exception as e:
            logger.error(f"Error fetching tickets: {e}")
            raise HTTPException(status_code=500, detail="Failed to load tickets")
        return filter_tickets(tickets, search=search, view=view, today=today)

    def get_ticket(self, ticket_id: str) -> TicketResponse:
        try:
            result = self.supabase.table("tickets")\
                .select("*")\
                .eq("id", ticket_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load ticket")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return self._attach_users([result.data])[0]

    def update_ticket(self, ticket_id: str, ticket_data: TicketUpdate) -> TicketResponse:
        update_data = ticket_data.model_dump(exclude_unset=True, exclude={"assignee"})
        update_data = {k: v for k, v in update_data.items() if v is not None}
        if "due_date" in update_data:
            update_data["due_date"] = update_data["due_date"].isoformat()
        try:
            if ticket_data.assignee and ticket_data.assignee.strip():
                update_data["assignee_id"] = self.user_service.find_or_create_by_name(ticket_data.assignee)
            if not update_data:
                return self.get_ticket(ticket_id)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("tickets")\
                .update(update_data)\
                .eq("id", ticket_id)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update ticket")

        if not result.data:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return self._attach_users(result.data)[0]

    def delete_ticket(self, ticket_id: str) -> bool:
        try:
            result = self.supabase.table("tickets")\
                .delete()\
                .eq("id", ticket_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting ticket {ticket_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete ticket")
        if not result.data:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return True
