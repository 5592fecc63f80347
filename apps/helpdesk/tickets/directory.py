"""Read-only lookups into user profiles and ticket reference data."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from packages.db.models import CategoryTable, LocationTable, UserTable

from .actors import Role
from .models import Category, Location, UserProfile


class UserDirectory:
    """Resolve user ids to profiles and expose the agent roster."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_user(self, user_id: str) -> UserProfile | None:
        async with self._session_factory() as session:
            row = await session.get(UserTable, user_id)
            if row is None:
                return None
            return self._table_to_profile(row)

    async def list_agents(self) -> list[UserProfile]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserTable)
                .where(UserTable.role == Role.AGENT.value, UserTable.active == True)  # noqa: E712
                .order_by(UserTable.full_name.asc())
            )
            return [self._table_to_profile(row) for row in result.scalars().all()]

    async def is_active_agent(self, user_id: str) -> bool:
        profile = await self.get_user(user_id)
        return profile is not None and profile.active and profile.role is Role.AGENT

    @staticmethod
    def _table_to_profile(row: UserTable) -> UserProfile:
        return UserProfile(
            id=row.id,
            email=row.email,
            full_name=row.full_name,
            department=row.department,
            role=Role(row.role),
            active=bool(row.active),
        )


class ReferenceData:
    """Categories and locations offered on the filing form."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_category(self, category_id: str) -> Category | None:
        async with self._session_factory() as session:
            row = await session.get(CategoryTable, category_id)
        if row is None:
            return None
        return Category(id=row.id, name=row.name, description=row.description, active=bool(row.active))

    async def get_location(self, location_id: str) -> Location | None:
        async with self._session_factory() as session:
            row = await session.get(LocationTable, location_id)
        if row is None:
            return None
        return Location(id=row.id, name=row.name, building=row.building, active=bool(row.active))

    async def list_categories(self) -> list[Category]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CategoryTable)
                .where(CategoryTable.active == True)  # noqa: E712
                .order_by(CategoryTable.name.asc())
            )
            rows = result.scalars().all()
        return [Category(id=row.id, name=row.name, description=row.description, active=True) for row in rows]

    async def list_locations(self) -> list[Location]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(LocationTable)
                .where(LocationTable.active == True)  # noqa: E712
                .order_by(LocationTable.name.asc())
            )
            rows = result.scalars().all()
        return [Location(id=row.id, name=row.name, building=row.building, active=True) for row in rows]
