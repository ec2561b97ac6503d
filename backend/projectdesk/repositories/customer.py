"""Customer repository: lookup by name and by id."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projectdesk.models import Customer
from projectdesk.repositories.base import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    model = Customer

    async def find_by_name(self, session: AsyncSession, name: str) -> Optional[Customer]:
        result = await session.execute(
            select(Customer).where(Customer.name == name).order_by(Customer.customer_id).limit(1)
        )
        return result.scalars().first()

    async def find_by_id(self, session: AsyncSession, customer_id: int) -> Optional[Customer]:
        return await self.get(session, customer_id)


customer_repository = CustomerRepository()
