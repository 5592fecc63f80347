from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from apps.helpdesk.tickets.actors import Actor
from apps.helpdesk.tickets.assignment import AssignmentService
from apps.helpdesk.tickets.directory import ReferenceData, UserDirectory
from apps.helpdesk.tickets.queries import TicketQueryService
from apps.helpdesk.tickets.repository import TicketRepository
from apps.helpdesk.tickets.service import TicketService
from packages.db.models import CategoryTable, LocationTable, UserTable

from factories import (
    ADMIN,
    AGENT_A,
    AGENT_B,
    CATEGORY_ID,
    FILER,
    LOCATION_ID,
    OTHER_FILER,
    RETIRED_AGENT_ID,
    RETIRED_CATEGORY_ID,
    RETIRED_LOCATION_ID,
)


def _seed_rows() -> list[SQLModel]:
    return [
        UserTable(id=FILER.id, email="ana@campus.edu", full_name="Ana Filer", department="History", role="enduser"),
        UserTable(id=OTHER_FILER.id, email="omar@campus.edu", full_name="Omar Other", role="enduser"),
        UserTable(id=AGENT_A.id, email="alice@campus.edu", full_name="Alice Agent", department="IT", role="agent"),
        UserTable(id=AGENT_B.id, email="bruno@campus.edu", full_name="Bruno Agent", department="IT", role="agent"),
        UserTable(
            id=RETIRED_AGENT_ID,
            email="gone@campus.edu",
            full_name="Gone Agent",
            department="IT",
            role="agent",
            active=False,
        ),
        UserTable(id=ADMIN.id, email="root@campus.edu", full_name="Ada Admin", department="IT", role="administrator"),
        CategoryTable(id=CATEGORY_ID, name="Hardware", description="Projectors, printers, lab PCs"),
        CategoryTable(id=RETIRED_CATEGORY_ID, name="Fax machines", active=False),
        LocationTable(id=LOCATION_ID, name="Main Library", building="B1"),
        LocationTable(id=RETIRED_LOCATION_ID, name="Old Annex", building="B9", active=False),
    ]


@pytest_asyncio.fixture
async def engine() -> AsyncEngine:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        async with session.begin():
            session.add_all(_seed_rows())
    return factory


@pytest.fixture
def repository(session_factory: async_sessionmaker, engine: AsyncEngine) -> TicketRepository:
    return TicketRepository(session_factory, engine=engine)


@pytest.fixture
def directory(session_factory: async_sessionmaker) -> UserDirectory:
    return UserDirectory(session_factory)


@pytest.fixture
def reference_data(session_factory: async_sessionmaker) -> ReferenceData:
    return ReferenceData(session_factory)


@pytest.fixture
def ticket_service(
    repository: TicketRepository,
    directory: UserDirectory,
    reference_data: ReferenceData,
) -> TicketService:
    return TicketService(repository, directory=directory, reference_data=reference_data)


@pytest.fixture
def assignment_service(
    ticket_service: TicketService,
    repository: TicketRepository,
    directory: UserDirectory,
) -> AssignmentService:
    return AssignmentService(ticket_service, repository, directory)


@pytest.fixture
def query_service(repository: TicketRepository) -> TicketQueryService:
    return TicketQueryService(repository)


@pytest.fixture
def file_ticket(ticket_service: TicketService):
    async def _file(
        actor: Actor = FILER,
        *,
        title: str = "Projector broken",
        description: str = "Room 101 projector shows no signal",
    ):
        return await ticket_service.create_ticket(
            actor,
            title=title,
            description=description,
            category_id=CATEGORY_ID,
            location_id=LOCATION_ID,
        )

    return _file
