from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping

from .actors import Role
from .state import TicketStatus


@dataclass(slots=True)
class Ticket:
    """Aggregate representing a support ticket entry."""

    id: str
    title: str
    description: str
    category_id: str
    location_id: str
    user_id: str
    assigned_to: str | None
    status: TicketStatus
    created_at: datetime
    resolved_at: datetime | None = None
    closed_at: datetime | None = None
    # Display fields joined from reference and user rows on reads; never written back.
    category_name: str | None = None
    location_name: str | None = None
    location_building: str | None = None
    filer_name: str | None = None
    filer_email: str | None = None
    assignee_name: str | None = None


@dataclass(slots=True)
class Comment:
    """Remark attached to a ticket. ``internal`` comments are hidden from the filer."""

    id: str
    ticket_id: str
    user_id: str
    content: str
    internal: bool
    created_at: datetime
    author_name: str | None = None


@dataclass(slots=True)
class TicketPatch:
    """Fields written by a single lifecycle transition.

    ``None`` leaves a column untouched; none of the patched columns is ever
    cleared once set.
    """

    status: TicketStatus
    assigned_to: str | None = None
    resolved_at: datetime | None = None
    closed_at: datetime | None = None

    def values(self) -> dict[str, object]:
        values: dict[str, object] = {"status": self.status.value}
        if self.assigned_to is not None:
            values["assigned_to"] = self.assigned_to
        if self.resolved_at is not None:
            values["resolved_at"] = self.resolved_at
        if self.closed_at is not None:
            values["closed_at"] = self.closed_at
        return values


@dataclass(slots=True)
class TicketStats:
    """Ticket counts by status, recomputed from the full set on every fetch."""

    total: int = 0
    open: int = 0
    assigned: int = 0
    in_progress: int = 0
    resolved: int = 0
    closed: int = 0

    @classmethod
    def from_counts(cls, counts: Mapping[TicketStatus, int]) -> "TicketStats":
        return cls(
            total=sum(counts.values()),
            open=counts.get(TicketStatus.OPEN, 0),
            assigned=counts.get(TicketStatus.ASSIGNED, 0),
            in_progress=counts.get(TicketStatus.IN_PROGRESS, 0),
            resolved=counts.get(TicketStatus.RESOLVED, 0),
            closed=counts.get(TicketStatus.CLOSED, 0),
        )


@dataclass(slots=True)
class AdminOverview:
    """Administrator dashboard payload: every ticket plus status counts."""

    tickets: list[Ticket] = field(default_factory=list)
    stats: TicketStats = field(default_factory=TicketStats)


@dataclass(slots=True)
class UserProfile:
    id: str
    email: str
    full_name: str
    department: str | None
    role: Role
    active: bool = True


@dataclass(slots=True)
class Category:
    id: str
    name: str
    description: str | None
    active: bool = True


@dataclass(slots=True)
class Location:
    id: str
    name: str
    building: str | None
    active: bool = True
