import pytest

from apps.helpdesk.tickets.errors import InvalidStateError
from apps.helpdesk.tickets.state import TicketEvent, TicketStateMachine, TicketStatus


def test_ticket_state_machine_allows_expected_transitions():
    assert TicketStateMachine.initial_state() == TicketStatus.OPEN
    assert TicketStateMachine.can_transition(TicketStatus.OPEN, TicketStatus.ASSIGNED)
    assert TicketStateMachine.can_transition(TicketStatus.ASSIGNED, TicketStatus.IN_PROGRESS)
    assert TicketStateMachine.can_transition(TicketStatus.IN_PROGRESS, TicketStatus.RESOLVED)
    assert TicketStateMachine.can_transition(TicketStatus.RESOLVED, TicketStatus.CLOSED)


@pytest.mark.parametrize(
    ("current", "new"),
    [
        (TicketStatus.OPEN, TicketStatus.IN_PROGRESS),
        (TicketStatus.OPEN, TicketStatus.CLOSED),
        (TicketStatus.ASSIGNED, TicketStatus.OPEN),
        (TicketStatus.RESOLVED, TicketStatus.IN_PROGRESS),
        (TicketStatus.CLOSED, TicketStatus.OPEN),
        (TicketStatus.CLOSED, TicketStatus.CLOSED),
    ],
)
def test_ticket_state_machine_blocks_skips_and_backward_moves(current, new):
    assert not TicketStateMachine.can_transition(current, new)


def test_closed_is_terminal():
    assert TicketStateMachine.successor(TicketStatus.CLOSED) is None


def test_assert_event_returns_target_status():
    assert TicketStateMachine.assert_event(TicketStatus.OPEN, TicketEvent.ASSIGN) == TicketStatus.ASSIGNED
    assert TicketStateMachine.assert_event(TicketStatus.RESOLVED, TicketEvent.CLOSE) == TicketStatus.CLOSED


def test_assert_event_rejects_wrong_source_status():
    with pytest.raises(InvalidStateError):
        TicketStateMachine.assert_event(TicketStatus.ASSIGNED, TicketEvent.ASSIGN)
    with pytest.raises(InvalidStateError):
        TicketStateMachine.assert_event(TicketStatus.ASSIGNED, TicketEvent.RESOLVE)


def test_every_event_moves_exactly_one_step_forward():
    for event in TicketEvent:
        source = TicketStateMachine.source_of(event)
        assert TicketStateMachine.successor(source) == TicketStateMachine.target_of(event)
