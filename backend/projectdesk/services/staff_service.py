"""
Projectdesk Backend — Staff Service
=====================================

What:  Ensure-or-create for staff members, existence check, staff listing.

Resolution Order:
    1. Validate the descriptor (name and role name)
    2. Read-only lookup of the role and the staff row; return when both exist
    3. Ensure the role (RoleService.ensure_role)
    4. Look up staff by (name, role_id); insert if absent

    Steps 3 and 4 run in one owned-or-joined transaction, so a role created
    for a staff member that then fails to insert is rolled back with it.
"""

import logging
from typing import List, NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError

from projectdesk import database
from projectdesk.exceptions import DatabaseError, DependencyError, ValidationError
from projectdesk.models import Staff
from projectdesk.repositories import role_repository, staff_repository
from projectdesk.schemas.catalog import StaffDescriptor, StaffView
from projectdesk.services.ensure import EnsureOrCreate, owned_transaction
from projectdesk.services.role_service import normalize_role_name, role_service
from projectdesk.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class StaffKey(NamedTuple):
    """Natural identity of a staff member."""
    name: str
    role_id: int


class StaffService:

    def __init__(self):
        self._ensure = EnsureOrCreate[StaffKey, Staff](
            entity="Staff",
            lookup=self._lookup,
            key_of=lambda staff: staff.staff_id,
            insert=self._insert,
        )

    @staticmethod
    async def _lookup(uow: UnitOfWork, key: StaffKey):
        async with uow.reader() as session:
            return await staff_repository.find_by_name_and_role(session, key.name, key.role_id)

    @staticmethod
    async def _insert(uow: UnitOfWork, key: StaffKey) -> int:
        return await staff_repository.insert(uow.session, Staff(name=key.name, role_id=key.role_id))

    @staticmethod
    async def _find_existing(uow: UnitOfWork, descriptor: StaffDescriptor) -> Optional[Staff]:
        async with uow.reader() as session:
            role = await role_repository.find_by_name(session, normalize_role_name(descriptor.role_name))
            if role is None:
                return None
            return await staff_repository.find_by_name_and_role(session, descriptor.name, role.id)

    async def ensure_staff(self, uow: UnitOfWork, descriptor: Optional[StaffDescriptor]) -> int:
        """
        Return the id of the staff member (name, role), creating the role
        and/or the staff row as needed.

        Raises:
            ValidationError: Missing descriptor, empty name or empty role name.
            DependencyError: The role could not be resolved to a usable id.
        """
        if descriptor is None:
            raise ValidationError(message="Staff details cannot be empty.", field="staff")
        if not descriptor.name:
            raise ValidationError(message="Staff name is required.", field="staff.name")
        if not descriptor.role_name:
            raise ValidationError(message="Staff role name is required.", field="staff.role_name")

        existing = await self._find_existing(uow, descriptor)
        if existing is not None:
            logger.debug("Staff %r (%s) exists with key %d", descriptor.name, descriptor.role_name, existing.staff_id)
            return existing.staff_id

        async with owned_transaction(uow, "ensure staff"):
            role_id = await role_service.ensure_role(uow, descriptor.role_name)
            if role_id is None or role_id <= 0:
                logger.error("Role %r could not be resolved for staff %r", descriptor.role_name, descriptor.name)
                raise DependencyError(
                    message=f"Role '{descriptor.role_name}' does not exist and could not be created.",
                    dependency="role",
                )
            logger.debug("Role %r resolved to %d for staff %r", descriptor.role_name, role_id, descriptor.name)

            return await self._ensure(uow, StaffKey(name=descriptor.name, role_id=role_id))

    async def staff_exists(self, staff_id: int) -> bool:
        member = await database.run_read(lambda session: staff_repository.get(session, staff_id))
        return member is not None

    async def list_staff(self) -> List[StaffView]:
        try:
            staff = await database.run_read(staff_repository.list_with_roles)
        except SQLAlchemyError as e:
            logger.error("Database error listing staff: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve staff. Please try again.")
        return [
            StaffView(
                staff_id=member.staff_id,
                name=member.name,
                role_name=member.role.name if member.role else "No Role",
            )
            for member in staff
        ]


staff_service = StaffService()
