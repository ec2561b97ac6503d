"""Role repository: lookup by name."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projectdesk.models import Role
from projectdesk.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    model = Role

    async def find_by_name(self, session: AsyncSession, name: str) -> Optional[Role]:
        result = await session.execute(
            select(Role).where(Role.name == name).order_by(Role.id).limit(1)
        )
        return result.scalars().first()


role_repository = RoleRepository()
