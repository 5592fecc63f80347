from __future__ import annotations


class TicketServiceError(RuntimeError):
    """Base error for ticket service issues."""


class TicketValidationError(TicketServiceError):
    """Raised when required input is missing or blank."""


class NotAuthorizedError(TicketServiceError):
    """Raised when the actor lacks the role or relation an action requires."""


class InvalidStateError(TicketServiceError):
    """Raised when attempting a transition the current status does not allow."""


class ConcurrentModificationError(InvalidStateError):
    """Raised when another actor advanced the ticket between read and write."""


class InvalidReferenceError(TicketServiceError):
    """Raised when a referenced record is missing, inactive or has the wrong role."""


class TicketNotFoundError(TicketServiceError):
    """Raised when a ticket could not be located."""


class TicketStoreError(TicketServiceError):
    """Raised when the database rejects a write; the transaction has been rolled back."""
