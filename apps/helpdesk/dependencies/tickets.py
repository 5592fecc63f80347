from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from apps.helpdesk.dependencies.auth import role_required
from apps.helpdesk.tickets.actors import Actor, Role
from apps.helpdesk.tickets.assignment import AssignmentService
from apps.helpdesk.tickets.directory import ReferenceData
from apps.helpdesk.tickets.queries import TicketQueryService
from apps.helpdesk.tickets.service import TicketService

require_admin = role_required(Role.ADMINISTRATOR)
require_agent = role_required(Role.AGENT)

AdminActor = Annotated[Actor, Depends(require_admin)]
AgentActor = Annotated[Actor, Depends(require_agent)]


def _from_state(request: Request, name: str, label: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(status_code=503, detail=f"{label} is not configured")
    return service


async def get_ticket_service(request: Request) -> TicketService:
    return _from_state(request, "ticket_service", "Ticket service")


async def get_assignment_service(request: Request) -> AssignmentService:
    return _from_state(request, "assignment_service", "Assignment service")


async def get_query_service(request: Request) -> TicketQueryService:
    return _from_state(request, "query_service", "Ticket query service")


async def get_reference_data(request: Request) -> ReferenceData:
    return _from_state(request, "reference_data", "Reference data")


TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]
AssignmentServiceDep = Annotated[AssignmentService, Depends(get_assignment_service)]
QueryServiceDep = Annotated[TicketQueryService, Depends(get_query_service)]
ReferenceDataDep = Annotated[ReferenceData, Depends(get_reference_data)]
