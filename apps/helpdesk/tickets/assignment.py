from __future__ import annotations

from .actors import Actor, Role
from .directory import UserDirectory
from .models import Ticket, UserProfile
from .policy import TicketPolicy
from .repository import TicketStore
from .service import TicketService
from .state import TicketStatus


class AssignmentService:
    """Administrator-facing assignment queue on top of the lifecycle engine."""

    def __init__(
        self,
        tickets: TicketService,
        repository: TicketStore,
        directory: UserDirectory,
    ) -> None:
        self._tickets = tickets
        self._repository = repository
        self._directory = directory

    async def assign(self, actor: Actor, ticket_id: str, agent_id: str) -> Ticket:
        return await self._tickets.assign(actor, ticket_id, agent_id)

    async def list_unassigned(self, actor: Actor) -> list[Ticket]:
        TicketPolicy.require_role(actor, Role.ADMINISTRATOR, action="view the assignment queue")
        return await self._repository.find_tickets(status=TicketStatus.OPEN)

    async def list_agents(self, actor: Actor) -> list[UserProfile]:
        TicketPolicy.require_role(actor, Role.ADMINISTRATOR, action="view the agent roster")
        return await self._directory.list_agents()
