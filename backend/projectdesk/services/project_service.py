"""
Projectdesk Backend — Project Service (Business Logic Orchestrator)
=====================================================================

What:  Creates a project together with everything it depends on, updates
       and deletes projects, and serves the project read paths.
How:   Composes CustomerService, ServiceCatalog and StaffService inside one
       owned-or-joined transaction of the caller's UnitOfWork.
Who:   Called by the projects router; tests call it directly.

Orchestration Flow (create_project_with_details):
    ┌───────────┐   ┌──────────┐   ┌──────────┐   ┌─────────┐   ┌─────────┐
    │ Validate  │──▶│ Customer │──▶│ Service  │──▶│  Staff  │──▶│ Insert  │
    │ (no I/O)  │   │ id/ensure│   │ ensure   │   │ ensure  │   │ project │
    └───────────┘   └──────────┘   └──────────┘   └─────────┘   └─────────┘

    On failure at any step after validation:
    - An owned transaction is rolled back (rows created by the resolvers
      disappear with it); a joined one is left for its owner
    - The original exception propagates unchanged
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from projectdesk import database
from projectdesk.config import settings
from projectdesk.exceptions import (
    DatabaseError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from projectdesk.models import Project
from projectdesk.repositories import (
    customer_repository,
    project_repository,
    service_repository,
    staff_repository,
    status_repository,
)
from projectdesk.schemas.catalog import ServiceView, StaffView, StatusView
from projectdesk.schemas.project import (
    ProjectCreate,
    ProjectCreateDetailed,
    ProjectUpdate,
    ProjectView,
)
from projectdesk.services.customer_service import customer_service
from projectdesk.services.ensure import owned_transaction
from projectdesk.services.service_catalog import service_catalog
from projectdesk.services.staff_service import staff_service
from projectdesk.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

NO_SERVICE = ServiceView(service_id=0, name="No Service", hourly_price=Decimal("0.00"))
NO_STAFF = StaffView(staff_id=0, name="No Staff", role_name="N/A")


class ProjectService:
    """
    Business logic layer for projects.

    Responsibilities:
        - create_project(): existing customer, resolve service and staff, insert
        - create_project_with_details(): validate, resolve dependencies, insert
        - update_project() / delete_project(): write paths by project number
        - list_projects() / get_project() / list_statuses(): read paths

    Stateless: the unit of work is passed into every write call, read paths
    open their own short-lived sessions.
    """

    # ── Create ────────────────────────────────────────────────────────────
    async def create_project(self, uow: UnitOfWork, descriptor: ProjectCreate) -> str:
        """
        Create a project for an existing customer, resolving its service
        and staff member in the same transaction.

        Returns:
            The project number of the new project.

        Raises:
            ValidationError: A precondition failed, or customer_id is not positive.
            DependencyError: The customer id or status id does not exist.
            ConflictError: A project with this number already exists.
        """
        self._validate_create(descriptor)
        if descriptor.customer_id <= 0:
            raise ValidationError(message="An existing customer id is required.", field="customer_id")

        async with owned_transaction(uow, "create project"):
            await self._require_existing(uow, customer_repository, descriptor.customer_id, "customer")
            await self._require_status(uow, descriptor.status_id)

            service_id = await service_catalog.ensure_service(uow, descriptor.service)
            staff_id = await staff_service.ensure_staff(uow, descriptor.staff)

            project_number = await self._insert_project(
                uow, descriptor, descriptor.customer_id, service_id, staff_id
            )

        logger.info(
            "Project %s created (customer=%d, service=%d, staff=%d)",
            project_number, descriptor.customer_id, service_id, staff_id,
        )
        return project_number

    async def create_project_with_details(
        self,
        uow: UnitOfWork,
        descriptor: ProjectCreateDetailed,
    ) -> str:
        """
        Create a project, resolving its customer, service and staff first.

        Workflow Steps:
            1. Check the preconditions (no storage access)
            2. Own or join a transaction
            3. Customer: existing id, or ensure by descriptor name
            4. Status: must exist
            5. Ensure the service, then the staff member (and its role)
            6. Insert the project row

        Returns:
            The project number of the new project.

        Raises:
            ValidationError: A precondition failed, or no customer was given.
            DependencyError: The customer id or status id does not exist.
            ConflictError: A project with this number already exists.
        """
        self._validate_create(descriptor)

        async with owned_transaction(uow, "create project"):
            customer_id = await self._resolve_customer(uow, descriptor.customer_id, descriptor.customer)
            await self._require_status(uow, descriptor.status_id)

            service_id = await service_catalog.ensure_service(uow, descriptor.service)
            staff_id = await staff_service.ensure_staff(uow, descriptor.staff)

            project_number = await self._insert_project(uow, descriptor, customer_id, service_id, staff_id)

        logger.info(
            "Project %s created (customer=%d, service=%d, staff=%d)",
            project_number, customer_id, service_id, staff_id,
        )
        return project_number

    @staticmethod
    async def _insert_project(
        uow: UnitOfWork,
        descriptor: ProjectCreate,
        customer_id: int,
        service_id: int,
        staff_id: int,
    ) -> str:
        return await project_repository.insert(
            uow.session,
            Project(
                project_number=descriptor.project_number,
                name=descriptor.name,
                start_date=descriptor.start_date,
                end_date=descriptor.end_date,
                customer_id=customer_id,
                service_id=service_id,
                staff_id=staff_id,
                status_id=descriptor.status_id,
                total_price=descriptor.total_price,
                description=descriptor.description or settings.default_description,
            ),
        )

    @staticmethod
    def _validate_create(descriptor: Optional[ProjectCreate]) -> None:
        if descriptor is None:
            raise ValidationError(message="Project details cannot be empty.", field="project")
        if not descriptor.project_number:
            raise ValidationError(message="Project number is required.", field="project_number")
        if not descriptor.name:
            raise ValidationError(message="Project name is required.", field="name")
        if descriptor.service is None:
            raise ValidationError(message="Service details are required.", field="service")
        if descriptor.staff is None:
            raise ValidationError(message="Staff details are required.", field="staff")
        if descriptor.status_id <= 0:
            raise ValidationError(message="A valid status is required.", field="status_id")
        if descriptor.total_price < Decimal("0"):
            raise ValidationError(message="Total price cannot be negative.", field="total_price")
        if descriptor.start_date is None:
            raise ValidationError(message="Start date is required.", field="start_date")
        if descriptor.end_date is None:
            raise ValidationError(message="End date is required.", field="end_date")

    @staticmethod
    async def _resolve_customer(uow: UnitOfWork, customer_id: Optional[int], customer) -> int:
        if customer_id and customer_id > 0:
            async with uow.reader() as session:
                existing = await customer_repository.find_by_id(session, customer_id)
            if existing is None:
                raise DependencyError(
                    message=f"Customer {customer_id} does not exist.",
                    dependency="customer",
                )
            return customer_id

        if customer is not None and customer.name:
            return await customer_service.ensure_customer(uow, customer.name, customer.contact_person)

        raise ValidationError(
            message="Either an existing customer id or customer details are required.",
            field="customer",
        )

    @classmethod
    async def _require_status(cls, uow: UnitOfWork, status_id: int) -> None:
        await cls._require_existing(uow, status_repository, status_id, "status")

    @staticmethod
    async def _require_existing(uow: UnitOfWork, repository, key: int, dependency: str) -> None:
        async with uow.reader() as session:
            row = await repository.get(session, key)
        if row is None:
            raise DependencyError(
                message=f"{dependency.capitalize()} {key} does not exist.",
                dependency=dependency,
            )

    # ── Update / Delete ───────────────────────────────────────────────────
    async def update_project(self, uow: UnitOfWork, descriptor: ProjectUpdate) -> None:
        """
        Replace the editable fields of an existing project.

        Id fields left as None keep their stored value. A supplied customer,
        service or staff descriptor is resolved (find-or-create) and its id
        overrides the plain id field.

        Raises:
            ValidationError: Empty project number or name, or negative price.
            NotFoundError: No project has this number.
            DependencyError: A supplied customer, service, staff or status id
                does not exist.
        """
        if not descriptor.project_number:
            raise ValidationError(message="Project number is required.", field="project_number")
        if not descriptor.name:
            raise ValidationError(message="Project name is required.", field="name")
        if descriptor.total_price < Decimal("0"):
            raise ValidationError(message="Total price cannot be negative.", field="total_price")

        async with owned_transaction(uow, "update project"):
            project = await project_repository.get(uow.session, descriptor.project_number)
            if project is None:
                raise NotFoundError(resource="project", resource_id=descriptor.project_number)

            project.name = descriptor.name
            project.start_date = descriptor.start_date
            project.end_date = descriptor.end_date
            project.total_price = descriptor.total_price
            project.description = descriptor.description or settings.default_description

            if descriptor.customer_id is not None:
                await self._require_existing(uow, customer_repository, descriptor.customer_id, "customer")
                project.customer_id = descriptor.customer_id
            if descriptor.service_id is not None:
                await self._require_existing(uow, service_repository, descriptor.service_id, "service")
                project.service_id = descriptor.service_id
            if descriptor.staff_id is not None:
                await self._require_existing(uow, staff_repository, descriptor.staff_id, "staff")
                project.staff_id = descriptor.staff_id
            if descriptor.status_id is not None:
                await self._require_status(uow, descriptor.status_id)
                project.status_id = descriptor.status_id

            if descriptor.customer is not None and descriptor.customer.name:
                project.customer_id = await customer_service.ensure_customer(
                    uow, descriptor.customer.name, descriptor.customer.contact_person
                )
            if descriptor.service is not None:
                project.service_id = await service_catalog.ensure_service(uow, descriptor.service)
            if descriptor.staff is not None:
                project.staff_id = await staff_service.ensure_staff(uow, descriptor.staff)

            await project_repository.update(uow.session, project)

        logger.info("Project %s updated", descriptor.project_number)

    async def delete_project(self, uow: UnitOfWork, project_number: str) -> bool:
        """Delete a project by number; False when it does not exist."""
        async with owned_transaction(uow, "delete project"):
            project = await project_repository.get(uow.session, project_number)
            if project is None:
                logger.info("Project %s not found for deletion", project_number)
                return False
            await project_repository.delete(uow.session, project)

        logger.info("Project %s deleted", project_number)
        return True

    # ── Read Paths ────────────────────────────────────────────────────────
    async def list_projects(self) -> List[ProjectView]:
        try:
            projects = await database.run_read(project_repository.list_detailed)
        except SQLAlchemyError as e:
            logger.error("Database error listing projects: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve projects. Please try again.")
        return [self._to_view(project) for project in projects]

    async def get_project(self, project_number: str) -> ProjectView:
        """
        Raises:
            NotFoundError: No project has this number.
        """
        try:
            project = await database.run_read(
                lambda session: project_repository.get_detailed(session, project_number)
            )
        except SQLAlchemyError as e:
            logger.error("Database error fetching project %s: %s", project_number, str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve the project. Please try again.")

        if project is None:
            raise NotFoundError(resource="project", resource_id=project_number)
        return self._to_view(project)

    async def list_statuses(self) -> List[StatusView]:
        try:
            statuses = await database.run_read(status_repository.list_all)
        except SQLAlchemyError as e:
            logger.error("Database error listing statuses: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve statuses. Please try again.")
        return [StatusView.model_validate(status) for status in statuses]

    @staticmethod
    def _to_view(project: Project) -> ProjectView:
        service = NO_SERVICE
        if project.service is not None:
            service = ServiceView.model_validate(project.service)

        staff = NO_STAFF
        if project.staff is not None:
            staff = StaffView(
                staff_id=project.staff.staff_id,
                name=project.staff.name,
                role_name=project.staff.role.name if project.staff.role else "No Role",
            )

        # Negative prices written outside the service read as 0
        total_price = project.total_price if project.total_price and project.total_price > 0 else Decimal("0.00")

        return ProjectView(
            project_number=project.project_number,
            name=project.name,
            start_date=project.start_date,
            end_date=project.end_date,
            customer_id=project.customer_id or 0,
            customer_name=project.customer.name if project.customer else "Unknown Customer",
            contact_person=project.customer.contact_person if project.customer else None,
            service_id=project.service_id or 0,
            staff_id=project.staff_id or 0,
            status_id=project.status_id or 0,
            status_name=(project.status.name if project.status else None) or "No Status",
            total_price=total_price,
            description=project.description or settings.default_description,
            service=service,
            staff=staff,
        )


project_service = ProjectService()
