from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased
from sqlmodel import SQLModel, select

from packages.db.models import CategoryTable, CommentTable, LocationTable, TicketTable, UserTable

from .errors import ConcurrentModificationError, TicketNotFoundError, TicketStoreError
from .models import Comment, Ticket, TicketPatch
from .state import TicketStatus


class TicketStore(Protocol):
    """Operations the lifecycle engine needs from ticket and comment storage."""

    async def create_ticket(self, ticket: Ticket) -> Ticket:
        ...

    async def get_ticket(self, ticket_id: str) -> Ticket | None:
        ...

    async def find_tickets(
        self,
        *,
        user_id: str | None = None,
        assigned_to: str | None = None,
        status: TicketStatus | None = None,
        exclude_status: TicketStatus | None = None,
    ) -> list[Ticket]:
        ...

    async def update_ticket(
        self,
        ticket_id: str,
        *,
        expected_status: TicketStatus,
        patch: TicketPatch,
        comment: Comment | None = None,
    ) -> Ticket:
        ...

    async def count_by_status(self) -> dict[TicketStatus, int]:
        ...

    async def append_comment(self, comment: Comment) -> Comment:
        ...

    async def list_comments(self, ticket_id: str) -> list[Comment]:
        ...


class TicketRepository:
    """Persistence helper wrapping the `tickets` and `comments` tables.

    Reads join the category, location and user rows so that listings carry
    display names alongside the ids. Database failures on writes surface as
    ``TicketStoreError`` after the transaction has been rolled back.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        engine: AsyncEngine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine: AsyncEngine | None = engine

    async def ensure_schema(self) -> None:
        if self._engine is None:
            raise RuntimeError("Session factory is not bound to an async engine")
        async with self._engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.create_all)

    async def create_ticket(self, ticket: Ticket) -> Ticket:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(
                        TicketTable(
                            id=ticket.id,
                            title=ticket.title,
                            description=ticket.description,
                            category_id=ticket.category_id,
                            location_id=ticket.location_id,
                            user_id=ticket.user_id,
                            assigned_to=ticket.assigned_to,
                            status=ticket.status.value,
                            created_at=ticket.created_at,
                            resolved_at=ticket.resolved_at,
                            closed_at=ticket.closed_at,
                        )
                    )
        except SQLAlchemyError as exc:
            raise TicketStoreError(f"Could not store ticket {ticket.id}") from exc
        return await self.get_ticket(ticket.id) or ticket

    async def get_ticket(self, ticket_id: str) -> Ticket | None:
        async with self._session_factory() as session:
            result = await session.execute(_ticket_query().where(TicketTable.id == ticket_id))
            row = result.first()
        if row is None:
            return None
        return self._row_to_ticket(row)

    async def find_tickets(
        self,
        *,
        user_id: str | None = None,
        assigned_to: str | None = None,
        status: TicketStatus | None = None,
        exclude_status: TicketStatus | None = None,
    ) -> list[Ticket]:
        statement = _ticket_query()
        if user_id is not None:
            statement = statement.where(TicketTable.user_id == user_id)
        if assigned_to is not None:
            statement = statement.where(TicketTable.assigned_to == assigned_to)
        if status is not None:
            statement = statement.where(TicketTable.status == status.value)
        if exclude_status is not None:
            statement = statement.where(TicketTable.status != exclude_status.value)
        statement = statement.order_by(TicketTable.created_at.desc())

        async with self._session_factory() as session:
            result = await session.execute(statement)
            return [self._row_to_ticket(row) for row in result.all()]

    async def update_ticket(
        self,
        ticket_id: str,
        *,
        expected_status: TicketStatus,
        patch: TicketPatch,
        comment: Comment | None = None,
    ) -> Ticket:
        """Apply ``patch`` only if the ticket is still in ``expected_status``.

        When ``comment`` is given it is inserted in the same transaction, so the
        status change and the comment are committed or rolled back together.
        """

        statement = (
            update(TicketTable)
            .where(TicketTable.id == ticket_id, TicketTable.status == expected_status.value)
            .values(**patch.values())
            .execution_options(synchronize_session=False)
        )

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(statement)
                    if result.rowcount == 0:
                        existing = await session.get(TicketTable, ticket_id)
                        if existing is None:
                            raise TicketNotFoundError(f"Ticket {ticket_id} not found")
                        raise ConcurrentModificationError(
                            f"Ticket {ticket_id} is {existing.status}, expected {expected_status.value}"
                        )

                    if comment is not None:
                        session.add(self._comment_to_table(comment))
                        await session.flush()

                    refreshed = await session.execute(
                        _ticket_query()
                        .where(TicketTable.id == ticket_id)
                        .execution_options(populate_existing=True)
                    )
                    ticket = self._row_to_ticket(refreshed.one())
        except SQLAlchemyError as exc:
            raise TicketStoreError(f"Could not update ticket {ticket_id}; no changes were applied") from exc
        return ticket

    async def count_by_status(self) -> dict[TicketStatus, int]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(TicketTable.status, func.count()).group_by(TicketTable.status)
            )
            return {TicketStatus(status): int(count) for status, count in result.all()}

    async def append_comment(self, comment: Comment) -> Comment:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(self._comment_to_table(comment))
                    author = await session.get(UserTable, comment.user_id)
        except SQLAlchemyError as exc:
            raise TicketStoreError(f"Could not store comment on ticket {comment.ticket_id}") from exc
        comment.author_name = author.full_name if author is not None else None
        return comment

    async def list_comments(self, ticket_id: str) -> list[Comment]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CommentTable, UserTable.full_name.label("author_name"))
                .outerjoin(UserTable, UserTable.id == CommentTable.user_id)
                .where(CommentTable.ticket_id == ticket_id)
                .order_by(CommentTable.created_at.asc(), CommentTable.seq.asc())
            )
            comments = []
            for row in result.all():
                comment = self._table_to_comment(row[0])
                comment.author_name = row.author_name
                comments.append(comment)
            return comments

    @staticmethod
    def _comment_to_table(comment: Comment) -> CommentTable:
        return CommentTable(
            id=comment.id,
            ticket_id=comment.ticket_id,
            user_id=comment.user_id,
            content=comment.content,
            internal=comment.internal,
            created_at=comment.created_at,
        )

    @classmethod
    def _row_to_ticket(cls, row) -> Ticket:
        ticket = cls._table_to_ticket(row[0])
        ticket.category_name = row.category_name
        ticket.location_name = row.location_name
        ticket.location_building = row.location_building
        ticket.filer_name = row.filer_name
        ticket.filer_email = row.filer_email
        ticket.assignee_name = row.assignee_name
        return ticket

    @staticmethod
    def _table_to_ticket(row: TicketTable) -> Ticket:
        return Ticket(
            id=row.id,
            title=row.title,
            description=row.description,
            category_id=row.category_id,
            location_id=row.location_id,
            user_id=row.user_id,
            assigned_to=row.assigned_to,
            status=TicketStatus(row.status),
            created_at=_ensure_datetime(row.created_at),
            resolved_at=_optional_datetime(row.resolved_at),
            closed_at=_optional_datetime(row.closed_at),
        )

    @staticmethod
    def _table_to_comment(row: CommentTable) -> Comment:
        return Comment(
            id=row.id,
            ticket_id=row.ticket_id,
            user_id=row.user_id,
            content=row.content,
            internal=bool(row.internal),
            created_at=_ensure_datetime(row.created_at),
        )


def _ticket_query():
    """Tickets joined with the names shown next to them in listings."""

    filer = aliased(UserTable)
    assignee = aliased(UserTable)
    return (
        select(
            TicketTable,
            CategoryTable.name.label("category_name"),
            LocationTable.name.label("location_name"),
            LocationTable.building.label("location_building"),
            filer.full_name.label("filer_name"),
            filer.email.label("filer_email"),
            assignee.full_name.label("assignee_name"),
        )
        .outerjoin(CategoryTable, CategoryTable.id == TicketTable.category_id)
        .outerjoin(LocationTable, LocationTable.id == TicketTable.location_id)
        .outerjoin(filer, filer.id == TicketTable.user_id)
        .outerjoin(assignee, assignee.id == TicketTable.assigned_to)
    )


def _ensure_datetime(value: datetime | None) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    raise TypeError("Expected datetime value from database")


def _optional_datetime(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return _ensure_datetime(value)
