"""Ticket lifecycle, comment visibility and role-gated queries."""

from .actors import Actor, Role
from .assignment import AssignmentService
from .errors import (
    ConcurrentModificationError,
    InvalidReferenceError,
    InvalidStateError,
    NotAuthorizedError,
    TicketNotFoundError,
    TicketServiceError,
    TicketStoreError,
    TicketValidationError,
)
from .models import AdminOverview, Category, Comment, Location, Ticket, TicketPatch, TicketStats, UserProfile
from .queries import TicketQueryService
from .service import TicketService
from .state import TicketEvent, TicketStateMachine, TicketStatus

__all__ = [
    "Actor",
    "AdminOverview",
    "AssignmentService",
    "Category",
    "Comment",
    "ConcurrentModificationError",
    "InvalidReferenceError",
    "InvalidStateError",
    "Location",
    "NotAuthorizedError",
    "Role",
    "Ticket",
    "TicketEvent",
    "TicketNotFoundError",
    "TicketPatch",
    "TicketQueryService",
    "TicketService",
    "TicketServiceError",
    "TicketStoreError",
    "TicketStateMachine",
    "TicketStats",
    "TicketStatus",
    "TicketValidationError",
    "UserProfile",
]
