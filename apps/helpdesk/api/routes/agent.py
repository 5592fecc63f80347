from __future__ import annotations

from fastapi import APIRouter

from apps.helpdesk.api.routes.tickets import TicketResponse, http_error, to_ticket_response
from apps.helpdesk.dependencies.tickets import AgentActor, QueryServiceDep
from apps.helpdesk.tickets.errors import TicketServiceError

router = APIRouter(prefix="/agent", tags=["agent"])


@router.get("/queue", response_model=list[TicketResponse], summary="Active tickets assigned to the caller")
async def agent_queue(queries: QueryServiceDep, actor: AgentActor) -> list[TicketResponse]:
    try:
        tickets = await queries.agent_view(actor)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return [to_ticket_response(ticket) for ticket in tickets]
