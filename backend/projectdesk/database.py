"""
Projectdesk Backend — Database Session Management
===================================================

What:  Async SQLAlchemy engine, session factory, unit-of-work dependency,
       schema bootstrap and reference-data seeding.
How:   Creates an async engine with connection pooling. Every request gets
       its own UnitOfWork (one session, at most one transaction); read-only
       queries open their own short-lived sessions from the same factory.
Who:   Used by route handlers via FastAPI's dependency injection system and
       by services for independent read sessions.
When:  Engine is created at module import; units of work are created per-request.

Connection Pooling Strategy:
    pool_size=20:     Persistent connections for normal load
    max_overflow=10:  Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:    Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs (tests, local runs) skip the pool sizing, enable foreign
    key enforcement on every new connection and let SQLAlchemy emit BEGIN
    itself so SAVEPOINTs nest inside the outer transaction.
"""

import logging
from decimal import Decimal
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, TypeVar

from sqlalchemy import event, select
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from projectdesk.config import settings
from projectdesk.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ── Engine Configuration ──────────────────────────────────────────────────
def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options())


if settings.is_sqlite:
    @event.listens_for(engine.sync_engine, "connect")
    def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
        # SQLite ignores REFERENCES clauses unless enabled per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        # Stop the driver from issuing its own BEGIN/COMMIT; a released
        # SAVEPOINT would otherwise commit the whole transaction.
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_sqlite_transaction(conn) -> None:
        conn.exec_driver_sql("BEGIN")


# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: rows returned by a closed read session stay readable
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    used by init_models() and by Alembic.
    """
    pass


# ── Read Sessions ─────────────────────────────────────────────────────────
def _is_transient(exc: BaseException) -> bool:
    # OperationalError covers dropped connections and lock timeouts;
    # connection_invalidated is set when the pool discarded the connection.
    if isinstance(exc, OperationalError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def _read_retry_wait():
    # Exponential backoff capped at the max wait, plus up to min_wait of jitter
    return (
        wait_exponential(multiplier=settings.db_read_retry_min_wait, max=settings.db_read_retry_max_wait)
        + wait_random(0, settings.db_read_retry_min_wait)
    )


@retry(
    retry=retry_if_exception(_is_transient),
    stop=stop_after_attempt(settings.db_read_retry_attempts),
    wait=_read_retry_wait(),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def run_read(query: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """
    Run a read-only query on its own short-lived session.

    What:  Used by every list/get read path; never joins a unit of work.
    How:   Each attempt opens a fresh session, so a retry after a dropped
           connection gets a new one from the pool. Non-transient errors
           propagate on the first attempt.

    Example:
        services = await run_read(service_repository.list_all)
    """
    async with async_session_factory() as session:
        return await query(session)


# ── Unit of Work Dependency ───────────────────────────────────────────────
async def get_unit_of_work() -> AsyncGenerator[UnitOfWork, None]:
    """
    FastAPI dependency that provides one UnitOfWork per request.

    How it works:
        1. Creates a UnitOfWork bound to the session factory
        2. Yields it to the route handler; services own or join its transaction
        3. On exit: a still-active transaction is rolled back and the
           session is closed (returns connection to pool)

    Unlike a commit-on-success session dependency, nothing is committed
    here. Commits happen only where a service owns the transaction.

    Example usage in a route:
        @router.post("/roles/ensure")
        async def ensure_role(body: RoleDescriptor, uow: UnitOfWork = Depends(get_unit_of_work)):
            return await role_service.ensure_role(uow, body.name)
    """
    async with UnitOfWork(async_session_factory) as uow:
        yield uow


# ── Schema & Reference Data ───────────────────────────────────────────────
# Statuses are read-only reference data; roles and services are only the
# starting catalog and grow through the ensure resolvers.
REFERENCE_STATUSES = ("New", "In Progress", "Completed")
REFERENCE_ROLES = ("Project Manager", "Developer", "Designer")
REFERENCE_SERVICES = (
    ("Consulting", Decimal("100.00")),
    ("Development", Decimal("150.00")),
)


async def init_models() -> None:
    """
    What:  Creates all tables that do not exist yet.
    When:  Startup with SEED_REFERENCE_DATA enabled, and the test suite.
           Production schemas are managed by Alembic.
    """
    import projectdesk.models  # noqa: F401  (registers every table on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_reference_data(include_catalog: bool = True) -> None:
    """
    What:  Inserts the reference statuses (and the starting role/service
           catalog) that are not stored yet.
    How:   Matches by name, so running it twice inserts nothing new.

    Args:
        include_catalog: Also seed the default roles and services.
    """
    from projectdesk.models import Role, Service, Status

    async with async_session_factory() as session:
        async with session.begin():
            existing = set((await session.execute(select(Status.name))).scalars())
            for name in REFERENCE_STATUSES:
                if name not in existing:
                    session.add(Status(name=name))

            if include_catalog:
                existing = set((await session.execute(select(Role.name))).scalars())
                for name in REFERENCE_ROLES:
                    if name not in existing:
                        session.add(Role(name=name))

                existing = set((await session.execute(select(Service.name))).scalars())
                for name, price in REFERENCE_SERVICES:
                    if name not in existing:
                        session.add(Service(name=name, hourly_price=price))

    logger.info("Reference data seeded (catalog=%s)", include_catalog)


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
