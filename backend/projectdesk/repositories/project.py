"""
Project repository.

Detailed reads eagerly load customer, service, staff (with role) and status
so views can be built after the read session is closed.
"""

from typing import List, Optional

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from projectdesk.models import Project, Staff
from projectdesk.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    @staticmethod
    def _with_relations():
        return (
            selectinload(Project.customer),
            selectinload(Project.service),
            selectinload(Project.staff).selectinload(Staff.role),
            selectinload(Project.status),
        )

    async def get_detailed(self, session: AsyncSession, project_number: str) -> Optional[Project]:
        result = await session.execute(
            select(Project)
            .options(*self._with_relations())
            .where(Project.project_number == project_number)
        )
        return result.scalars().first()

    async def list_detailed(self, session: AsyncSession) -> List[Project]:
        result = await session.execute(
            select(Project)
            .options(*self._with_relations())
            .order_by(Project.project_number)
        )
        return list(result.scalars().all())

    def conflict_message(self, row: Project) -> str:
        if inspect(row).persistent:
            return f"Project '{row.project_number}' references a customer, service, staff or status that does not exist"
        return f"Project '{row.project_number}' already exists"


project_repository = ProjectRepository()
