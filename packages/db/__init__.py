"""Database models and utilities."""

from .models import (
    CategoryTable,
    CommentTable,
    LocationTable,
    TicketTable,
    UserTable,
)

__all__ = [
    "CategoryTable",
    "CommentTable",
    "LocationTable",
    "TicketTable",
    "UserTable",
]
