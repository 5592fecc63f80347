"""Role and relation checks shared by every ticket operation."""

from __future__ import annotations

from typing import Iterable

from .actors import Actor, Role
from .errors import NotAuthorizedError
from .models import Comment, Ticket


class TicketPolicy:
    """Decide what an actor may do with a ticket.

    All role branching for the lifecycle and comment operations goes through
    this class so that every client surface enforces the same rules.
    """

    @staticmethod
    def require_role(actor: Actor, role: Role, *, action: str) -> None:
        if not actor.has_role(role):
            raise NotAuthorizedError(f"Only {role.value} accounts may {action}")

    @staticmethod
    def is_filer(actor: Actor, ticket: Ticket) -> bool:
        return ticket.user_id == actor.id

    @staticmethod
    def is_assignee(actor: Actor, ticket: Ticket) -> bool:
        return ticket.assigned_to is not None and ticket.assigned_to == actor.id

    @classmethod
    def can_access(cls, actor: Actor, ticket: Ticket) -> bool:
        if actor.is_administrator:
            return True
        return cls.is_filer(actor, ticket) or cls.is_assignee(actor, ticket)

    @classmethod
    def require_access(cls, actor: Actor, ticket: Ticket) -> None:
        if not cls.can_access(actor, ticket):
            raise NotAuthorizedError(f"Actor {actor.id} cannot access ticket {ticket.id}")

    @classmethod
    def require_assignee(cls, actor: Actor, ticket: Ticket, *, action: str) -> None:
        if not cls.is_assignee(actor, ticket):
            raise NotAuthorizedError(f"Only the assigned agent may {action} ticket {ticket.id}")

    @classmethod
    def require_filer(cls, actor: Actor, ticket: Ticket, *, action: str) -> None:
        if not cls.is_filer(actor, ticket):
            raise NotAuthorizedError(f"Only the filer may {action} ticket {ticket.id}")

    @staticmethod
    def effective_internal_flag(actor: Actor, requested: bool) -> bool:
        """Internal comments can only be written by staff."""

        return bool(requested) and actor.is_staff

    @staticmethod
    def visible_comments(actor: Actor, comments: Iterable[Comment]) -> list[Comment]:
        if actor.is_staff:
            return list(comments)
        return [comment for comment in comments if not comment.internal]
