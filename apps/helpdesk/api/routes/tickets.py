from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from apps.helpdesk.dependencies.auth import CurrentActor
from apps.helpdesk.dependencies.tickets import QueryServiceDep, TicketServiceDep
from apps.helpdesk.tickets.errors import (
    InvalidReferenceError,
    InvalidStateError,
    NotAuthorizedError,
    TicketNotFoundError,
    TicketServiceError,
    TicketStoreError,
    TicketValidationError,
)
from apps.helpdesk.tickets.models import Comment, Ticket
from apps.helpdesk.tickets.state import TicketStatus

router = APIRouter(prefix="/tickets", tags=["tickets"])

_STATUS_CODES: tuple[tuple[type[TicketServiceError], int], ...] = (
    (TicketValidationError, 422),
    (InvalidReferenceError, 422),
    (NotAuthorizedError, 403),
    (TicketNotFoundError, 404),
    (InvalidStateError, 409),
    (TicketStoreError, 500),
)


def http_error(exc: TicketServiceError) -> HTTPException:
    """Translate a service error into the matching HTTP response."""

    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


class TicketCreateRequest(BaseModel):
    title: str = Field(..., max_length=255)
    description: str
    category_id: str
    location_id: str


class TicketResolveRequest(BaseModel):
    resolution: str


class CommentCreateRequest(BaseModel):
    content: str
    internal: bool = False


class TicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    category_id: str
    location_id: str
    user_id: str
    assigned_to: str | None
    status: TicketStatus
    created_at: datetime
    resolved_at: datetime | None
    closed_at: datetime | None
    category_name: str | None = None
    location_name: str | None = None
    location_building: str | None = None
    filer_name: str | None = None
    filer_email: str | None = None
    assignee_name: str | None = None


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    ticket_id: str
    user_id: str
    content: str
    internal: bool
    created_at: datetime
    author_name: str | None = None


def to_ticket_response(ticket: Ticket) -> TicketResponse:
    return TicketResponse.model_validate(ticket)


def _to_comment_response(comment: Comment) -> CommentResponse:
    return CommentResponse.model_validate(comment)


@router.post("", response_model=TicketResponse, status_code=status.HTTP_201_CREATED)
async def create_ticket(payload: TicketCreateRequest, service: TicketServiceDep, actor: CurrentActor) -> TicketResponse:
    try:
        ticket = await service.create_ticket(
            actor,
            title=payload.title,
            description=payload.description,
            category_id=payload.category_id,
            location_id=payload.location_id,
        )
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return to_ticket_response(ticket)


@router.get("", response_model=list[TicketResponse], summary="Tickets relevant to the caller's role")
async def list_my_tickets(queries: QueryServiceDep, actor: CurrentActor) -> list[TicketResponse]:
    try:
        tickets = await queries.my_tickets(actor)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return [to_ticket_response(ticket) for ticket in tickets]


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(ticket_id: str, service: TicketServiceDep, actor: CurrentActor) -> TicketResponse:
    try:
        ticket = await service.get_ticket(actor, ticket_id)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return to_ticket_response(ticket)


@router.post("/{ticket_id}/start", response_model=TicketResponse)
async def start_work(ticket_id: str, service: TicketServiceDep, actor: CurrentActor) -> TicketResponse:
    try:
        ticket = await service.start_work(actor, ticket_id)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return to_ticket_response(ticket)


@router.post("/{ticket_id}/resolve", response_model=TicketResponse)
async def resolve_ticket(
    ticket_id: str,
    payload: TicketResolveRequest,
    service: TicketServiceDep,
    actor: CurrentActor,
) -> TicketResponse:
    try:
        ticket = await service.resolve(actor, ticket_id, payload.resolution)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return to_ticket_response(ticket)


@router.post("/{ticket_id}/close", response_model=TicketResponse)
async def close_ticket(ticket_id: str, service: TicketServiceDep, actor: CurrentActor) -> TicketResponse:
    try:
        ticket = await service.close(actor, ticket_id)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return to_ticket_response(ticket)


@router.get("/{ticket_id}/comments", response_model=list[CommentResponse])
async def list_comments(ticket_id: str, service: TicketServiceDep, actor: CurrentActor) -> list[CommentResponse]:
    try:
        comments = await service.list_comments(actor, ticket_id)
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return [_to_comment_response(comment) for comment in comments]


@router.post("/{ticket_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    ticket_id: str,
    payload: CommentCreateRequest,
    service: TicketServiceDep,
    actor: CurrentActor,
) -> CommentResponse:
    try:
        comment = await service.add_comment(
            actor,
            ticket_id,
            content=payload.content,
            internal=payload.internal,
        )
    except TicketServiceError as exc:
        raise http_error(exc) from exc
    return _to_comment_response(comment)
