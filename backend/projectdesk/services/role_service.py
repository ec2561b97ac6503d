"""
Projectdesk Backend — Role Service
====================================

What:  Ensure-or-create for roles, lookups by name or id without creation,
       role listing.
Who:   StaffService (resolves a staff member's role first), the roles router.
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from projectdesk import database
from projectdesk.exceptions import DatabaseError, NotFoundError, ValidationError
from projectdesk.models import Role
from projectdesk.repositories import role_repository
from projectdesk.schemas.catalog import RoleView
from projectdesk.services.ensure import EnsureOrCreate
from projectdesk.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def normalize_role_name(name: str) -> str:
    """Role names are trimmed before both lookup and insert."""
    return (name or "").strip()


class RoleService:
    """Stateless; the unit of work is passed into every transactional call."""

    def __init__(self):
        self._ensure = EnsureOrCreate[str, Role](
            entity="Role",
            lookup=self._lookup,
            key_of=lambda role: role.id,
            insert=self._insert,
        )

    @staticmethod
    async def _lookup(uow: UnitOfWork, name: str):
        async with uow.reader() as session:
            return await role_repository.find_by_name(session, name)

    @staticmethod
    async def _insert(uow: UnitOfWork, name: str) -> int:
        return await role_repository.insert(uow.session, Role(name=name))

    async def ensure_role(self, uow: UnitOfWork, name: str) -> int:
        """
        Return the id of the role called `name`, creating it if needed.

        Raises:
            ValidationError: The name is empty after trimming.
        """
        name = normalize_role_name(name)
        if not name:
            raise ValidationError(message="Role name cannot be empty.", field="name")

        logger.debug("Ensuring role %r", name)
        return await self._ensure(uow, name)

    async def get_role_id(self, name: str) -> int:
        """
        Return the id of an existing role without creating one.

        Raises:
            ValidationError: The name is empty.
            NotFoundError: No role has this name.
        """
        name = normalize_role_name(name)
        if not name:
            raise ValidationError(message="Role name cannot be empty.", field="name")

        role = await database.run_read(lambda session: role_repository.find_by_name(session, name))
        if role is None:
            raise NotFoundError(resource="role", resource_id=name)
        return role.id

    async def get_role(self, role_id: int) -> RoleView:
        """
        Raises:
            NotFoundError: No role has this id.
        """
        role = await database.run_read(lambda session: role_repository.get(session, role_id))
        if role is None:
            raise NotFoundError(resource="role", resource_id=role_id)
        return RoleView.model_validate(role)

    async def list_roles(self) -> List[RoleView]:
        try:
            roles = await database.run_read(role_repository.list_all)
        except SQLAlchemyError as e:
            logger.error("Database error listing roles: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve roles. Please try again.")
        return [RoleView.model_validate(role) for role in roles]


role_service = RoleService()
