from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from apps.helpdesk.api.routes.tickets import TicketResponse, http_error, to_ticket_response
from apps.helpdesk.dependencies.tickets import (
    AdminActor,
    AssignmentServiceDep,
    QueryServiceDep,
)
from apps.helpdesk.tickets.actors import Role
from apps.helpdesk.tickets.errors import TicketServiceError

router = APIRouter(prefix="/admin", tags=["admin"])


class TicketStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    open: int
    assigned: int
    in_progress: int
    resolved: int
    closed: int


class AdminOverviewResponse(BaseModel):
    tickets: list[TicketResponse]
    stats: TicketStatsResponse


class AgentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str
    department: str | None
    role: Role


class AssignRequest(BaseModel):
    agent_id: str


@router.get("/tickets", response_model=AdminOverviewResponse, summary="All tickets with status counts")
async def admin_overview(queries: QueryServiceDep, actor: AdminActor) -> AdminOverviewResponse:
    try:
        overview = await queries.admin_view(actor)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return AdminOverviewResponse(
        tickets=[to_ticket_response(ticket) for ticket in overview.tickets],
        stats=TicketStatsResponse.model_validate(overview.stats),
    )


@router.get("/stats", response_model=TicketStatsResponse)
async def ticket_stats(queries: QueryServiceDep, actor: AdminActor) -> TicketStatsResponse:
    try:
        stats = await queries.stats(actor)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return TicketStatsResponse.model_validate(stats)


@router.get("/queue", response_model=list[TicketResponse], summary="Open tickets awaiting assignment")
async def assignment_queue(assignments: AssignmentServiceDep, actor: AdminActor) -> list[TicketResponse]:
    try:
        tickets = await assignments.list_unassigned(actor)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return [to_ticket_response(ticket) for ticket in tickets]


@router.get("/agents", response_model=list[AgentResponse])
async def list_agents(assignments: AssignmentServiceDep, actor: AdminActor) -> list[AgentResponse]:
    try:
        agents = await assignments.list_agents(actor)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return [AgentResponse.model_validate(agent) for agent in agents]


@router.post("/tickets/{ticket_id}/assign", response_model=TicketResponse)
async def assign_ticket(
    ticket_id: str,
    payload: AssignRequest,
    assignments: AssignmentServiceDep,
    actor: AdminActor,
) -> TicketResponse:
    try:
        ticket = await assignments.assign(actor, ticket_id, payload.agent_id)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return to_ticket_response(ticket)
