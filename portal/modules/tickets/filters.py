"""Local list filters for tickets (search box and status tabs)."""
from datetime import date
from typing import List, Optional

from portal.modules.tickets.schemas import ACTIVE_STATUSES, TicketResponse


def matches_search(ticket: TicketResponse, search: str) -> bool:
    term = search.lower()
    assignee_name = ticket.assignee.name if ticket.assignee else ""
    return (
        term in ticket.title.lower()
        or term in assignee_name.lower()
        or term in ticket.id.lower()
    )


def is_overdue(ticket: TicketResponse, today: date) -> bool:
    return ticket.due_date is not None and ticket.due_date < today and ticket.status != "completed"


def filter_tickets(
    tickets: List[TicketResponse],
    search: Optional[str] = None,
    view: str = "all",
    today: Optional[date] = None
) -> List[TicketResponse]:
    today = today or date.today()
    if search and search.strip():
        tickets = [t for t in tickets if matches_search(t, search.strip())]
    if view == "active":
        return [t for t in tickets if t.status in ACTIVE_STATUSES]
    if view == "completed":
        return [t for t in tickets if t.status == "completed"]
    if view == "overdue":
        return [t for t in tickets if is_overdue(t, today)]
    return tickets
