"""
Projectdesk Backend — Unit of Work
====================================

What:  Owns one AsyncSession and at most one active transaction at a time.
How:   begin() opens a transaction on the session, commit() flushes and
       commits it, rollback() discards it. has_active_transaction lets a
       caller decide whether it starts a transaction or joins the one that
       is already open.
Who:   Created per request (see database.get_unit_of_work) and passed
       explicitly into every resolver and workflow call.

State Machine:
    Idle ──begin()──▶ Active ──commit()───▶ Committed ─┐
                        │                              ├──▶ Idle
                        └──rollback()─▶ RolledBack ────┘

    begin() while Active raises TransactionError (no nested transactions).
    savepoint() opens a SAVEPOINT inside the active transaction; an error
    inside it rolls back only the savepoint.
    commit()/rollback() while Idle are logged no-ops.
    Leaving the `async with` block while Active forces a rollback.

Reads vs Writes:
    reader() gives natural-key lookups a session that never requires a
    transaction. While a transaction is active it is the transaction's own
    session, so lookups see rows inserted earlier in the same unit of work.
    Otherwise it is an independent session opened and closed around the read.
    Writes go through `session`, which is only available while Active.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from projectdesk.exceptions import TransactionError

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Transaction context passed by handle into repositories and services.

    Usage:
        async with UnitOfWork(async_session_factory) as uow:
            await uow.begin()
            ...
            await uow.commit()
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._active = False
        self._closed = False

    # ── State ─────────────────────────────────────────────────────────────
    @property
    def has_active_transaction(self) -> bool:
        return self._active

    @property
    def session(self) -> AsyncSession:
        """The write session; only available inside a transaction."""
        if not self._active or self._session is None:
            raise TransactionError(message="No active transaction for a write operation")
        return self._session

    # ── Transaction Control ───────────────────────────────────────────────
    async def begin(self) -> None:
        if self._closed:
            raise TransactionError(message="Unit of work is already closed")
        if self._active:
            logger.warning("begin() called while a transaction is already in progress")
            raise TransactionError(message="Transaction is already in progress")

        if self._session is None:
            self._session = self._session_factory()
        await self._session.begin()
        self._active = True
        logger.info("Transaction started")

    async def commit(self) -> None:
        if not self._active:
            logger.warning("commit() called with no active transaction")
            return

        try:
            await self._session.commit()
        except BaseException as e:
            logger.error("Commit failed, rolling back: %s", str(e))
            await self.rollback()
            raise

        self._end_transaction()
        logger.info("Transaction committed")

    async def rollback(self) -> None:
        if not self._active:
            logger.warning("rollback() called with no active transaction")
            return

        try:
            await self._session.rollback()
            logger.warning("Transaction rolled back")
        finally:
            # Back to Idle whether or not the driver call succeeded
            self._end_transaction()

    def _end_transaction(self) -> None:
        # Each transaction starts from an empty identity map; rows loaded
        # earlier stay readable as detached objects.
        self._session.expunge_all()
        self._active = False

    def savepoint(self):
        """
        Usage:
            async with uow.savepoint():
                await repository.insert(uow.session, row)
        """
        return self.session.begin_nested()

    # ── Reads ─────────────────────────────────────────────────────────────
    @asynccontextmanager
    async def reader(self) -> AsyncIterator[AsyncSession]:
        if self._active:
            yield self._session
            return

        async with self._session_factory() as session:
            yield session

    # ── Disposal ──────────────────────────────────────────────────────────
    async def close(self) -> None:
        if self._closed:
            return
        try:
            if self._active:
                logger.warning("Unit of work closed with an active transaction; rolling back")
                await self.rollback()
        finally:
            if self._session is not None:
                await self._session.close()
                self._session = None
            self._closed = True

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
