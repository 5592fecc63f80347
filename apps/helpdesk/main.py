from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from apps.helpdesk.api.routes import admin, agent, ping, reference, tickets
from apps.helpdesk.core.config import get_settings
from apps.helpdesk.core.logging import configure_logging, init_tracer, shutdown_tracer
from apps.helpdesk.tickets.assignment import AssignmentService
from apps.helpdesk.tickets.directory import ReferenceData, UserDirectory
from apps.helpdesk.tickets.queries import TicketQueryService
from apps.helpdesk.tickets.repository import TicketRepository
from apps.helpdesk.tickets.service import TicketService


def _to_asyncpg_dsn(dsn: str) -> str:
    """Ensure the SQLAlchemy DSN uses the asyncpg driver."""

    if dsn.startswith("postgresql+asyncpg://"):
        return dsn
    if dsn.startswith("postgresql://"):
        return "postgresql+asyncpg://" + dsn[len("postgresql://") :]
    return dsn


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - executed by framework
    settings = get_settings()
    logger = configure_logging(settings)
    tracer_provider = init_tracer(settings)

    app.state.logger = logger
    app.state.tracer_provider = tracer_provider

    db_engine = create_async_engine(_to_asyncpg_dsn(settings.postgres_dsn), future=True)
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)
    try:
        ticket_repository = TicketRepository(session_factory, engine=db_engine)
        await ticket_repository.ensure_schema()

        directory = UserDirectory(session_factory)
        reference_data = ReferenceData(session_factory)
        ticket_service = TicketService(
            ticket_repository,
            directory=directory,
            reference_data=reference_data,
        )

        app.state.user_directory = directory
        app.state.reference_data = reference_data
        app.state.ticket_service = ticket_service
        app.state.assignment_service = AssignmentService(ticket_service, ticket_repository, directory)
        app.state.query_service = TicketQueryService(ticket_repository)
        logger.info("helpdesk services ready (%s)", settings.environment)
        yield
    finally:
        await db_engine.dispose()
        shutdown_tracer(tracer_provider)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.include_router(ping.router)
    app.include_router(reference.router)
    app.include_router(tickets.router)
    app.include_router(agent.router)
    app.include_router(admin.router)
    return app


app = create_app()
