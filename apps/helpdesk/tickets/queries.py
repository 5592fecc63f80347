"""Per-role ticket listings layered over the ticket store."""

from __future__ import annotations

from collections import Counter

from .actors import Actor, Role
from .models import AdminOverview, Ticket, TicketStats
from .policy import TicketPolicy
from .repository import TicketStore
from .state import TicketStatus


class TicketQueryService:
    """Role-gated ticket views. All lists are newest first."""

    def __init__(self, repository: TicketStore) -> None:
        self._repository = repository

    async def filer_view(self, actor: Actor) -> list[Ticket]:
        return await self._repository.find_tickets(user_id=actor.id)

    async def agent_view(self, actor: Actor) -> list[Ticket]:
        # Closed tickets leave the agent's queue for good.
        TicketPolicy.require_role(actor, Role.AGENT, action="view an agent queue")
        return await self._repository.find_tickets(
            assigned_to=actor.id,
            exclude_status=TicketStatus.CLOSED,
        )

    async def stats(self, actor: Actor) -> TicketStats:
        TicketPolicy.require_role(actor, Role.ADMINISTRATOR, action="view ticket statistics")
        counts = await self._repository.count_by_status()
        return TicketStats.from_counts(counts)

    async def admin_view(self, actor: Actor) -> AdminOverview:
        TicketPolicy.require_role(actor, Role.ADMINISTRATOR, action="view all tickets")
        tickets = await self._repository.find_tickets()
        # Counted from the same read so the totals always match the list.
        stats = TicketStats.from_counts(Counter(ticket.status for ticket in tickets))
        return AdminOverview(tickets=tickets, stats=stats)

    async def my_tickets(self, actor: Actor) -> list[Ticket]:
        if actor.is_administrator:
            return (await self.admin_view(actor)).tickets
        if actor.is_agent:
            return await self.agent_view(actor)
        return await self.filer_view(actor)
