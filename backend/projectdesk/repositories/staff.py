"""Staff repository: lookup by the (name, role_id) natural key."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from projectdesk.models import Staff
from projectdesk.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class StaffRepository(BaseRepository[Staff]):
    model = Staff

    async def find_by_name_and_role(
        self, session: AsyncSession, name: str, role_id: int
    ) -> Optional[Staff]:
        result = await session.execute(
            select(Staff)
            .where(Staff.name == name, Staff.role_id == role_id)
            .order_by(Staff.staff_id)
            .limit(1)
        )
        staff = result.scalars().first()
        if staff is None:
            logger.debug("No staff named %r with role_id %d", name, role_id)
        return staff

    async def list_with_roles(self, session: AsyncSession) -> List[Staff]:
        result = await session.execute(
            select(Staff).options(selectinload(Staff.role)).order_by(Staff.staff_id)
        )
        return list(result.scalars().all())


staff_repository = StaffRepository()
