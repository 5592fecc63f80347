"""SQLModel table definitions for the helpdesk data layer."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    """Return a timezone aware UTC timestamp."""

    return datetime.now(timezone.utc)


def _uuid_str() -> str:
    """Generate a random UUID string."""

    return str(uuid.uuid4())


class UserTable(SQLModel, table=True):
    """User profiles with the single role each account holds."""

    __tablename__ = "users"

    id: str = Field(default_factory=_uuid_str, primary_key=True, index=True)
    email: str = Field(sa_column=Column(String(255), nullable=False, unique=True))
    full_name: str = Field(sa_column=Column(String(255), nullable=False))
    department: str | None = Field(default=None, sa_column=Column(String(255), nullable=True))
    role: str = Field(sa_column=Column(String(50), nullable=False))
    active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))
    created_at: datetime = Field(default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))


class CategoryTable(SQLModel, table=True):
    """Problem categories offered when filing a ticket."""

    __tablename__ = "categories"

    id: str = Field(default_factory=_uuid_str, primary_key=True, index=True)
    name: str = Field(sa_column=Column(String(255), nullable=False))
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))


class LocationTable(SQLModel, table=True):
    """Campus locations a ticket can refer to."""

    __tablename__ = "locations"

    id: str = Field(default_factory=_uuid_str, primary_key=True, index=True)
    name: str = Field(sa_column=Column(String(255), nullable=False))
    building: str | None = Field(default=None, sa_column=Column(String(255), nullable=True))
    active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))


class TicketTable(SQLModel, table=True):
    """Support tickets filed by end users."""

    __tablename__ = "tickets"

    id: str = Field(primary_key=True, index=True)
    title: str = Field(sa_column=Column(String(255), nullable=False))
    description: str = Field(sa_column=Column(Text, nullable=False))
    category_id: str = Field(sa_column=Column(String(36), ForeignKey("categories.id"), nullable=False))
    location_id: str = Field(sa_column=Column(String(36), ForeignKey("locations.id"), nullable=False))
    user_id: str = Field(sa_column=Column(String(36), ForeignKey("users.id"), nullable=False, index=True))
    assigned_to: str | None = Field(
        default=None, sa_column=Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    )
    status: str = Field(sa_column=Column(String(50), nullable=False, index=True))
    created_at: datetime = Field(default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
    resolved_at: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    closed_at: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))


class CommentTable(SQLModel, table=True):
    """Append-only remarks attached to a ticket.

    ``seq`` is the surrogate key and doubles as the insertion order used to
    break ``created_at`` ties.
    """

    __tablename__ = "comments"

    seq: int | None = Field(default=None, primary_key=True)
    id: str = Field(sa_column=Column(String(36), nullable=False, unique=True, index=True))
    ticket_id: str = Field(
        sa_column=Column(String(36), ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    user_id: str = Field(sa_column=Column(String(36), ForeignKey("users.id"), nullable=False))
    content: str = Field(sa_column=Column(Text, nullable=False))
    internal: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    created_at: datetime = Field(default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
