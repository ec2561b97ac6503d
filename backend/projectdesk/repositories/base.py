"""
Projectdesk Backend — Base Repository
=======================================

What:  Generic get/list/insert/update/delete shared by the entity repositories.
How:   Parameterized by the ORM model class. Subclasses add natural-key
       lookups (find_by_name, find_by_name_and_role, ...).
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import inspect, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from projectdesk.database import Base
from projectdesk.exceptions import ConflictError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    model: Type[ModelT]

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    @property
    def _primary_key(self):
        return inspect(self.model).primary_key[0]

    async def get(self, session: AsyncSession, key: Any) -> Optional[ModelT]:
        """Fetch a row by primary key; None when it does not exist."""
        row = await session.get(self.model, key)
        if row is None:
            logger.debug("%s %r not found", self.entity_name, key)
        return row

    async def list_all(self, session: AsyncSession) -> List[ModelT]:
        result = await session.execute(select(self.model).order_by(self._primary_key))
        return list(result.scalars().all())

    async def insert(self, session: AsyncSession, row: ModelT) -> Any:
        """
        Stage a new row and flush it so the database assigns its key.

        Returns:
            The primary key of the inserted row.

        Raises:
            ConflictError: The flush violated a unique or foreign key constraint.
        """
        session.add(row)
        await self._flush(session, row)
        key = inspect(row).identity[0]
        logger.debug("%s inserted with key %r", self.entity_name, key)
        return key

    async def update_fields(self, session: AsyncSession, key: Any, **values: Any) -> None:
        """Update columns of one row by primary key without loading it first."""
        await session.execute(
            update(self.model).where(self._primary_key == key).values(**values)
        )
        logger.debug("%s %r updated: %s", self.entity_name, key, sorted(values))

    async def update(self, session: AsyncSession, row: ModelT) -> None:
        """Flush pending changes made to a row loaded by `session`."""
        await self._flush(session, row)

    async def delete(self, session: AsyncSession, row: ModelT) -> None:
        await session.delete(row)
        await session.flush()

    async def _flush(self, session: AsyncSession, row: ModelT) -> None:
        # A failed flush expires the row, so the message is built beforehand
        message = self.conflict_message(row)
        try:
            await session.flush()
        except IntegrityError as e:
            logger.warning("%s write rejected by a constraint: %s", self.entity_name, e.orig)
            raise ConflictError(
                message=message,
                context={"entity": self.entity_name},
            ) from e

    def conflict_message(self, row: ModelT) -> str:
        return f"{self.entity_name} conflicts with existing data"
