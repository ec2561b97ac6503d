"""Service repository: lookup by name (the service's natural key)."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projectdesk.models import Service
from projectdesk.repositories.base import BaseRepository


class ServiceRepository(BaseRepository[Service]):
    model = Service

    async def find_by_name(self, session: AsyncSession, name: str) -> Optional[Service]:
        result = await session.execute(
            select(Service).where(Service.name == name).order_by(Service.service_id).limit(1)
        )
        return result.scalars().first()


service_repository = ServiceRepository()
