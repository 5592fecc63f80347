from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from opentelemetry import trace

from .actors import Actor, Role
from .directory import ReferenceData, UserDirectory
from .errors import InvalidReferenceError, TicketNotFoundError, TicketValidationError
from .models import Comment, Ticket, TicketPatch
from .policy import TicketPolicy
from .repository import TicketStore
from .state import TicketEvent, TicketStateMachine

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _require_text(value: str | None, *, field: str) -> str:
    if value is None or not value.strip():
        raise TicketValidationError(f"{field} must not be blank")
    return value


class TicketService:
    """High level orchestration for the ticket lifecycle and its comments.

    Every operation takes the acting identity explicitly. Checks run in a fixed
    order: input validation, ticket visibility, current status, actor
    authorization, then references to other records.
    """

    def __init__(
        self,
        repository: TicketStore,
        *,
        directory: UserDirectory,
        reference_data: ReferenceData,
        state_machine: type[TicketStateMachine] = TicketStateMachine,
        policy: type[TicketPolicy] = TicketPolicy,
    ) -> None:
        self._repository = repository
        self._directory = directory
        self._reference_data = reference_data
        self._state_machine = state_machine
        self._policy = policy

    async def create_ticket(
        self,
        actor: Actor,
        *,
        title: str,
        description: str,
        category_id: str,
        location_id: str,
    ) -> Ticket:
        title = _require_text(title, field="title").strip()
        description = _require_text(description, field="description")
        self._policy.require_role(actor, Role.ENDUSER, action="file tickets")

        category = await self._reference_data.get_category(category_id)
        if category is None or not category.active:
            raise InvalidReferenceError(f"Category {category_id} is not available")
        location = await self._reference_data.get_location(location_id)
        if location is None or not location.active:
            raise InvalidReferenceError(f"Location {location_id} is not available")

        ticket = Ticket(
            id=str(uuid.uuid4()),
            title=title,
            description=description,
            category_id=category_id,
            location_id=location_id,
            user_id=actor.id,
            assigned_to=None,
            status=self._state_machine.initial_state(),
            created_at=datetime.now(timezone.utc),
        )
        created = await self._repository.create_ticket(ticket)
        logger.info("ticket %s filed by %s", created.id, actor.id)
        return created

    async def get_ticket(self, actor: Actor, ticket_id: str) -> Ticket:
        return await self._load_visible(actor, ticket_id)

    async def assign(self, actor: Actor, ticket_id: str, agent_id: str) -> Ticket:
        ticket = await self._load_visible(actor, ticket_id)
        target = self._state_machine.assert_event(ticket.status, TicketEvent.ASSIGN)
        self._policy.require_role(actor, Role.ADMINISTRATOR, action="assign tickets")
        if not await self._directory.is_active_agent(agent_id):
            raise InvalidReferenceError(f"User {agent_id} is not an active agent")

        return await self._apply(
            actor,
            ticket,
            TicketEvent.ASSIGN,
            TicketPatch(status=target, assigned_to=agent_id),
        )

    async def start_work(self, actor: Actor, ticket_id: str) -> Ticket:
        ticket = await self._load_visible(actor, ticket_id)
        target = self._state_machine.assert_event(ticket.status, TicketEvent.START_WORK)
        self._policy.require_assignee(actor, ticket, action="start work on")

        return await self._apply(actor, ticket, TicketEvent.START_WORK, TicketPatch(status=target))

    async def resolve(self, actor: Actor, ticket_id: str, resolution_text: str) -> Ticket:
        resolution_text = _require_text(resolution_text, field="resolution")
        ticket = await self._load_visible(actor, ticket_id)
        target = self._state_machine.assert_event(ticket.status, TicketEvent.RESOLVE)
        self._policy.require_assignee(actor, ticket, action="resolve")

        now = datetime.now(timezone.utc)
        resolution = Comment(
            id=str(uuid.uuid4()),
            ticket_id=ticket_id,
            user_id=actor.id,
            content=resolution_text,
            internal=False,
            created_at=now,
        )
        return await self._apply(
            actor,
            ticket,
            TicketEvent.RESOLVE,
            TicketPatch(status=target, resolved_at=now),
            comment=resolution,
        )

    async def close(self, actor: Actor, ticket_id: str) -> Ticket:
        ticket = await self._load_visible(actor, ticket_id)
        target = self._state_machine.assert_event(ticket.status, TicketEvent.CLOSE)
        self._policy.require_filer(actor, ticket, action="close")

        return await self._apply(
            actor,
            ticket,
            TicketEvent.CLOSE,
            TicketPatch(status=target, closed_at=datetime.now(timezone.utc)),
        )

    async def add_comment(
        self,
        actor: Actor,
        ticket_id: str,
        *,
        content: str,
        internal: bool = False,
    ) -> Comment:
        content = _require_text(content, field="content")
        await self._load_visible(actor, ticket_id)

        effective_internal = self._policy.effective_internal_flag(actor, internal)
        if internal and not effective_internal:
            logger.warning(
                "internal flag dropped for comment by %s (%s) on ticket %s",
                actor.id,
                actor.role.value,
                ticket_id,
            )

        comment = Comment(
            id=str(uuid.uuid4()),
            ticket_id=ticket_id,
            user_id=actor.id,
            content=content,
            internal=effective_internal,
            created_at=datetime.now(timezone.utc),
        )
        return await self._repository.append_comment(comment)

    async def list_comments(self, actor: Actor, ticket_id: str) -> list[Comment]:
        await self._load_visible(actor, ticket_id)
        comments = await self._repository.list_comments(ticket_id)
        return self._policy.visible_comments(actor, comments)

    async def _apply(
        self,
        actor: Actor,
        ticket: Ticket,
        event: TicketEvent,
        patch: TicketPatch,
        *,
        comment: Comment | None = None,
    ) -> Ticket:
        # Conditioned on the status read by the caller; a concurrent writer makes this raise.
        with tracer.start_as_current_span(f"ticket.{event.value}") as span:
            span.set_attribute("helpdesk.ticket_id", ticket.id)
            span.set_attribute("helpdesk.actor_role", actor.role.value)
            updated = await self._repository.update_ticket(
                ticket.id,
                expected_status=ticket.status,
                patch=patch,
                comment=comment,
            )
        logger.info(
            "ticket %s %s -> %s by %s",
            ticket.id,
            ticket.status.value,
            updated.status.value,
            actor.id,
        )
        return updated

    async def _load(self, ticket_id: str) -> Ticket:
        ticket = await self._repository.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")
        return ticket

    async def _load_visible(self, actor: Actor, ticket_id: str) -> Ticket:
        # Callers outside the ticket never learn its status from a transition error.
        ticket = await self._load(ticket_id)
        self._policy.require_access(actor, ticket)
        return ticket
