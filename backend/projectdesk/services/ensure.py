"""
Projectdesk Backend — Ensure-or-Create Resolution
===================================================

What:  The own-or-join transaction scope and the generic find-or-create
       resolver shared by roles, services, staff and customers.
How:   owned_transaction() begins a transaction only when the unit of work
       has none, and commits/rolls back only what it began.
       EnsureOrCreate looks a descriptor up by its natural key and inserts
       (or, where configured, updates) inside that scope.

Ownership Rules:
    ┌──────────────────────┬─────────────────────┬────────────────────────┐
    │ On entry             │ On success          │ On failure             │
    ├──────────────────────┼─────────────────────┼────────────────────────┤
    │ no transaction       │ begin … commit      │ begin … rollback, raise│
    │ transaction active   │ join, no commit     │ join, raise only       │
    └──────────────────────┴─────────────────────┴────────────────────────┘

    A joined call never commits or rolls back; the owner at the outermost
    level sees the exception and rolls back everything, including rows the
    joined resolvers inserted.

    Inserts run inside a savepoint. When a concurrent writer already stored
    the same natural key, the unique constraint rejects the insert, only the
    savepoint is rolled back and the existing row's key is returned.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Generic, Optional, TypeVar

from projectdesk.exceptions import ConflictError
from projectdesk.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

DescriptorT = TypeVar("DescriptorT")
RowT = TypeVar("RowT")


@asynccontextmanager
async def owned_transaction(uow: UnitOfWork, operation: str) -> AsyncIterator[bool]:
    """
    Start a transaction if none is active, else join the active one.

    Yields:
        True when this scope began (and therefore owns) the transaction.
    """
    owned = not uow.has_active_transaction
    if owned:
        await uow.begin()
        logger.debug("[%s] started a new transaction", operation)
    else:
        logger.debug("[%s] joined the active transaction", operation)

    try:
        yield owned
    except BaseException:
        # Cancellation takes the same path as any other failure
        if owned:
            logger.warning("[%s] failed, rolling back its transaction", operation)
            await uow.rollback()
        raise

    if owned:
        await uow.commit()


@dataclass(frozen=True)
class EnsureOrCreate(Generic[DescriptorT, RowT]):
    """
    Find-or-create capability for one entity type.

    Attributes:
        entity:   Entity name used in log lines.
        lookup:   Reads the existing row by natural key; must not require a
                  transaction (it receives the unit of work to pick a reader).
        key_of:   Extracts the identity key from a row.
        insert:   Inserts a new row for the descriptor and returns its key.
                  Always called inside owned_transaction() and a savepoint;
                  a ConflictError from it means another writer won the race,
                  and the winner found by a second lookup is returned.
        is_stale: Optional; True when an existing row must be updated to
                  match the descriptor.
        update:   Optional; applies that update. Called inside
                  owned_transaction() only when is_stale() is true.
    """

    entity: str
    lookup: Callable[[UnitOfWork, DescriptorT], Awaitable[Optional[RowT]]]
    key_of: Callable[[RowT], int]
    insert: Callable[[UnitOfWork, DescriptorT], Awaitable[int]]
    is_stale: Optional[Callable[[RowT, DescriptorT], bool]] = None
    update: Optional[Callable[[UnitOfWork, RowT, DescriptorT], Awaitable[None]]] = None

    async def __call__(self, uow: UnitOfWork, descriptor: DescriptorT) -> int:
        existing = await self.lookup(uow, descriptor)

        if existing is not None:
            key = self.key_of(existing)
            if self.update is not None and self.is_stale is not None and self.is_stale(existing, descriptor):
                logger.info("%s %d exists but is out of date; updating", self.entity, key)
                async with owned_transaction(uow, f"ensure {self.entity}"):
                    await self.update(uow, existing, descriptor)
            else:
                logger.debug("%s exists with key %d", self.entity, key)
            return key

        async with owned_transaction(uow, f"ensure {self.entity}"):
            try:
                async with uow.savepoint():
                    key = await self.insert(uow, descriptor)
            except ConflictError:
                # Another writer inserted the same natural key after our lookup
                winner = await self.lookup(uow, descriptor)
                if winner is None:
                    raise
                key = self.key_of(winner)
                logger.info("%s was created concurrently; using key %d", self.entity, key)
                return key

        logger.info("%s created with key %d", self.entity, key)
        return key
