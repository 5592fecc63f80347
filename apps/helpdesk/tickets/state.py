from __future__ import annotations

from enum import Enum
from typing import Mapping

from .errors import InvalidStateError


class TicketStatus(str, Enum):
    """Supported states for a ticket's lifecycle."""

    OPEN = "open"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class TicketEvent(str, Enum):
    """Lifecycle events, each owned by exactly one transition."""

    ASSIGN = "assign"
    START_WORK = "start_work"
    RESOLVE = "resolve"
    CLOSE = "close"


class TicketStateMachine:
    """Validate ticket lifecycle transitions.

    The lifecycle is a strict chain: every status has at most one successor and
    every event is legal from exactly one status.
    """

    _TRANSITIONS: Mapping[TicketEvent, tuple[TicketStatus, TicketStatus]] = {
        TicketEvent.ASSIGN: (TicketStatus.OPEN, TicketStatus.ASSIGNED),
        TicketEvent.START_WORK: (TicketStatus.ASSIGNED, TicketStatus.IN_PROGRESS),
        TicketEvent.RESOLVE: (TicketStatus.IN_PROGRESS, TicketStatus.RESOLVED),
        TicketEvent.CLOSE: (TicketStatus.RESOLVED, TicketStatus.CLOSED),
    }

    _ORDER: tuple[TicketStatus, ...] = (
        TicketStatus.OPEN,
        TicketStatus.ASSIGNED,
        TicketStatus.IN_PROGRESS,
        TicketStatus.RESOLVED,
        TicketStatus.CLOSED,
    )

    @classmethod
    def initial_state(cls) -> TicketStatus:
        return TicketStatus.OPEN

    @classmethod
    def source_of(cls, event: TicketEvent) -> TicketStatus:
        return cls._TRANSITIONS[event][0]

    @classmethod
    def target_of(cls, event: TicketEvent) -> TicketStatus:
        return cls._TRANSITIONS[event][1]

    @classmethod
    def successor(cls, status: TicketStatus) -> TicketStatus | None:
        index = cls._ORDER.index(status)
        if index + 1 >= len(cls._ORDER):
            return None
        return cls._ORDER[index + 1]

    @classmethod
    def can_transition(cls, current: TicketStatus, new: TicketStatus) -> bool:
        return cls.successor(current) == new

    @classmethod
    def assert_event(cls, current: TicketStatus, event: TicketEvent) -> TicketStatus:
        """Return the target status of ``event`` or raise if ``current`` forbids it."""

        source, target = cls._TRANSITIONS[event]
        if current != source:
            raise InvalidStateError(
                f"Cannot {event.value} a ticket in status {current.value!s}; expected {source.value!s}"
            )
        return target
