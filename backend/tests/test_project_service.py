"""
Projectdesk Backend — Project Service Tests
=============================================

What:  The detailed-creation workflow, update/delete and the read paths.

What we test:
    ✅ The full P-1001 scenario on an empty catalog
    ✅ Plain create for an existing customer id, atomic with its service/staff
    ✅ A repeated project number raises ConflictError and changes nothing
    ✅ Each precondition raises its own ValidationError before storage
    ✅ Existing customer id path, missing customer/status → DependencyError
    ✅ A failure late in the workflow rolls back every resolver's rows
    ✅ Update and delete by project number
    ✅ Update with an unknown customer/service/staff id raises DependencyError
    ✅ Read path clamps negative prices and fills placeholders
"""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import update

from projectdesk import database
from projectdesk.exceptions import ConflictError, DependencyError, NotFoundError, ValidationError
from projectdesk.models import Customer, Project, Role, Service, Staff
from projectdesk.repositories import project_repository
from projectdesk.schemas.catalog import CustomerDescriptor, ServiceDescriptor, StaffDescriptor
from projectdesk.schemas.project import ProjectCreate, ProjectCreateDetailed, ProjectUpdate
from projectdesk.services.customer_service import customer_service
from projectdesk.services.project_service import ProjectService


def make_descriptor(**overrides) -> ProjectCreateDetailed:
    values = dict(
        project_number="P-1001",
        name="Website Revamp",
        start_date=date(2025, 1, 1),
        end_date=date(2025, 3, 1),
        status_id=1,
        total_price=Decimal("5000.00"),
        service=ServiceDescriptor(name="Development", hourly_price=Decimal("150.00")),
        staff=StaffDescriptor(name="Bob", role_name="Developer"),
        customer=CustomerDescriptor(name="Acme Inc", contact_person="Jane"),
    )
    values.update(overrides)
    return ProjectCreateDetailed(**values)


async def snapshot(count_rows):
    return tuple([await count_rows(model) for model in (Customer, Role, Staff, Service, Project)])


class TestCreateProjectWithDetails:

    def setup_method(self):
        self.service = ProjectService()

    @pytest.mark.asyncio
    async def test_full_workflow_on_empty_catalog(self, uow, count_rows):
        project_number = await self.service.create_project_with_details(uow, make_descriptor())

        assert project_number == "P-1001"
        assert not uow.has_active_transaction
        assert await count_rows(Customer, name="Acme Inc") == 1
        assert await count_rows(Role, name="Developer") == 1
        assert await count_rows(Staff, name="Bob") == 1
        assert await count_rows(Service, name="Development") == 1
        assert await count_rows(Project) == 1

        view = await self.service.get_project("P-1001")
        assert view.name == "Website Revamp"
        assert view.customer_name == "Acme Inc"
        assert view.contact_person == "Jane"
        assert view.status_id == 1
        assert view.status_name == "New"
        assert view.total_price == Decimal("5000.00")
        assert view.service.name == "Development"
        assert view.service.hourly_price == Decimal("150.00")
        assert view.staff.name == "Bob"
        assert view.staff.role_name == "Developer"
        assert view.customer_id > 0 and view.service_id > 0 and view.staff_id > 0

    @pytest.mark.asyncio
    async def test_reuses_existing_catalog_entries(self, uow, count_rows):
        await self.service.create_project_with_details(uow, make_descriptor())
        await self.service.create_project_with_details(uow, make_descriptor(project_number="P-1002"))

        assert await snapshot(count_rows) == (1, 1, 1, 1, 2)

    @pytest.mark.asyncio
    async def test_repeat_project_number_conflicts_and_changes_nothing(self, uow, count_rows):
        await self.service.create_project_with_details(uow, make_descriptor())
        before = await snapshot(count_rows)

        with pytest.raises(ConflictError, match="P-1001"):
            await self.service.create_project_with_details(uow, make_descriptor())

        assert not uow.has_active_transaction
        assert await snapshot(count_rows) == before

    @pytest.mark.asyncio
    async def test_conflict_rolls_back_new_dependencies(self, uow, count_rows):
        await self.service.create_project_with_details(uow, make_descriptor())

        with pytest.raises(ConflictError):
            await self.service.create_project_with_details(
                uow,
                make_descriptor(
                    customer=CustomerDescriptor(name="Globex"),
                    staff=StaffDescriptor(name="Carol", role_name="Designer"),
                ),
            )

        assert await count_rows(Customer, name="Globex") == 0
        assert await count_rows(Role, name="Designer") == 0
        assert await count_rows(Staff, name="Carol") == 0

    @pytest.mark.asyncio
    async def test_description_defaults_when_blank(self, uow):
        await self.service.create_project_with_details(uow, make_descriptor(description="   "))

        view = await self.service.get_project("P-1001")
        assert view.description == "No description provided"

    @pytest.mark.asyncio
    async def test_customer_contact_defaults(self, uow):
        await self.service.create_project_with_details(
            uow, make_descriptor(customer=CustomerDescriptor(name="Acme Inc"))
        )

        view = await self.service.get_project("P-1001")
        assert view.contact_person == "Unknown Contact"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"project_number": " "}, "project_number"),
            ({"name": ""}, "name"),
            ({"service": None}, "service"),
            ({"staff": None}, "staff"),
            ({"status_id": 0}, "status_id"),
            ({"total_price": Decimal("-0.01")}, "total_price"),
            ({"start_date": None}, "start_date"),
            ({"end_date": None}, "end_date"),
        ],
    )
    async def test_preconditions_rejected_before_storage(self, uow, count_rows, overrides, field):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_project_with_details(uow, make_descriptor(**overrides))

        assert exc_info.value.field == field
        assert not uow.has_active_transaction
        assert await snapshot(count_rows) == (0, 0, 0, 0, 0)

    @pytest.mark.asyncio
    async def test_missing_customer_rejected(self, uow, count_rows):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_project_with_details(
                uow, make_descriptor(customer=CustomerDescriptor(name=" "))
            )
        assert exc_info.value.field == "customer"
        assert await snapshot(count_rows) == (0, 0, 0, 0, 0)

    @pytest.mark.asyncio
    async def test_existing_customer_id_is_used(self, uow, count_rows):
        from projectdesk.services.customer_service import customer_service
        customer_id = await customer_service.ensure_customer(uow, "Initech", "Bill")

        await self.service.create_project_with_details(
            uow, make_descriptor(customer_id=customer_id, customer=None)
        )

        view = await self.service.get_project("P-1001")
        assert view.customer_id == customer_id
        assert view.customer_name == "Initech"
        assert await count_rows(Customer) == 1

    @pytest.mark.asyncio
    async def test_unknown_customer_id_is_a_dependency_error(self, uow, count_rows):
        with pytest.raises(DependencyError):
            await self.service.create_project_with_details(uow, make_descriptor(customer_id=999))
        assert await count_rows(Project) == 0

    @pytest.mark.asyncio
    async def test_unknown_status_rolls_back_customer(self, uow, count_rows):
        with pytest.raises(DependencyError) as exc_info:
            await self.service.create_project_with_details(uow, make_descriptor(status_id=42))

        assert exc_info.value.dependency == "status"
        assert await snapshot(count_rows) == (0, 0, 0, 0, 0)

    @pytest.mark.asyncio
    async def test_late_failure_rolls_back_all_resolvers(self, uow, count_rows):
        failing_insert = AsyncMock(side_effect=RuntimeError("disk full"))
        with patch("projectdesk.services.project_service.project_repository.insert", failing_insert):
            with pytest.raises(RuntimeError, match="disk full"):
                await self.service.create_project_with_details(uow, make_descriptor())

        assert not uow.has_active_transaction
        assert await snapshot(count_rows) == (0, 0, 0, 0, 0)

    @pytest.mark.asyncio
    async def test_joined_workflow_leaves_commit_to_caller(self, uow, count_rows):
        await uow.begin()
        await self.service.create_project_with_details(uow, make_descriptor())
        assert uow.has_active_transaction

        await uow.rollback()
        assert await snapshot(count_rows) == (0, 0, 0, 0, 0)


class TestCreateProject:

    def setup_method(self):
        self.service = ProjectService()

    async def _customer_id(self, uow) -> int:
        return await customer_service.ensure_customer(uow, "Acme Inc", "Jane")

    def _descriptor(self, customer_id: int, **overrides) -> ProjectCreate:
        values = make_descriptor().model_dump(exclude={"customer"})
        values.update(customer_id=customer_id, **overrides)
        return ProjectCreate(**values)

    @pytest.mark.asyncio
    async def test_creates_project_for_existing_customer(self, uow, count_rows):
        customer_id = await self._customer_id(uow)

        project_number = await self.service.create_project(uow, self._descriptor(customer_id))

        assert project_number == "P-1001"
        assert not uow.has_active_transaction
        assert await count_rows(Customer) == 1
        view = await self.service.get_project("P-1001")
        assert view.customer_id == customer_id
        assert view.service.name == "Development"
        assert view.staff.role_name == "Developer"

    @pytest.mark.asyncio
    async def test_customer_id_is_required(self, uow, count_rows):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_project(uow, self._descriptor(0))

        assert exc_info.value.field == "customer_id"
        assert await snapshot(count_rows) == (0, 0, 0, 0, 0)

    @pytest.mark.asyncio
    async def test_unknown_customer_creates_nothing(self, uow, count_rows):
        with pytest.raises(DependencyError) as exc_info:
            await self.service.create_project(uow, self._descriptor(42))

        assert exc_info.value.dependency == "customer"
        assert not uow.has_active_transaction
        assert await snapshot(count_rows) == (0, 0, 0, 0, 0)

    @pytest.mark.asyncio
    async def test_repeat_number_rolls_back_new_service_and_staff(self, uow, count_rows):
        customer_id = await self._customer_id(uow)
        await self.service.create_project(uow, self._descriptor(customer_id))
        before = await snapshot(count_rows)

        with pytest.raises(ConflictError, match="P-1001"):
            await self.service.create_project(
                uow,
                self._descriptor(
                    customer_id,
                    service=ServiceDescriptor(name="Design", hourly_price=Decimal("90.00")),
                    staff=StaffDescriptor(name="Carol", role_name="Designer"),
                ),
            )

        assert await snapshot(count_rows) == before


class TestUpdateAndDelete:

    def setup_method(self):
        self.service = ProjectService()

    @pytest.mark.asyncio
    async def test_update_changes_fields_and_resolves_descriptors(self, uow, count_rows):
        await self.service.create_project_with_details(uow, make_descriptor())

        await self.service.update_project(
            uow,
            ProjectUpdate(
                project_number="P-1001",
                name="Website Relaunch",
                start_date=date(2025, 2, 1),
                end_date=date(2025, 6, 1),
                status_id=2,
                total_price=Decimal("7500.00"),
                staff=StaffDescriptor(name="Carol", role_name="Designer"),
            ),
        )

        view = await self.service.get_project("P-1001")
        assert view.name == "Website Relaunch"
        assert view.end_date == date(2025, 6, 1)
        assert view.status_name == "In Progress"
        assert view.total_price == Decimal("7500.00")
        assert view.staff.name == "Carol"
        assert view.staff.role_name == "Designer"
        # Untouched ids keep their values
        assert view.customer_name == "Acme Inc"
        assert view.service.name == "Development"
        assert await count_rows(Staff) == 2

    @pytest.mark.asyncio
    async def test_update_missing_project_raises_not_found(self, uow):
        with pytest.raises(NotFoundError):
            await self.service.update_project(
                uow,
                ProjectUpdate(
                    project_number="P-404",
                    name="Ghost",
                    start_date=date(2025, 1, 1),
                    end_date=date(2025, 2, 1),
                ),
            )
        assert not uow.has_active_transaction

    @pytest.mark.asyncio
    async def test_update_blank_name_rejected(self, uow):
        await self.service.create_project_with_details(uow, make_descriptor())

        with pytest.raises(ValidationError):
            await self.service.update_project(
                uow,
                ProjectUpdate(
                    project_number="P-1001",
                    name="  ",
                    start_date=date(2025, 1, 1),
                    end_date=date(2025, 2, 1),
                ),
            )

        view = await self.service.get_project("P-1001")
        assert view.name == "Website Revamp"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field, dependency", [
        ("customer_id", "customer"),
        ("service_id", "service"),
        ("staff_id", "staff"),
    ])
    @pytest.mark.parametrize("missing_id", [999, 0])
    async def test_update_with_unknown_id_is_a_dependency_error(self, uow, field, dependency, missing_id):
        await self.service.create_project_with_details(uow, make_descriptor())
        before = await self.service.get_project("P-1001")

        with pytest.raises(DependencyError) as exc_info:
            await self.service.update_project(
                uow,
                ProjectUpdate(
                    project_number="P-1001",
                    name="X",
                    start_date=date(2025, 1, 1),
                    end_date=date(2025, 2, 1),
                    **{field: missing_id},
                ),
            )

        assert exc_info.value.dependency == dependency
        assert not uow.has_active_transaction
        after = await self.service.get_project("P-1001")
        assert after == before

    @pytest.mark.asyncio
    async def test_rejected_flush_of_loaded_project_raises_conflict(self, uow):
        await self.service.create_project_with_details(uow, make_descriptor())

        await uow.begin()
        project = await project_repository.get(uow.session, "P-1001")
        project.staff_id = 999
        with pytest.raises(ConflictError, match="P-1001"):
            await project_repository.update(uow.session, project)
        await uow.rollback()

        view = await self.service.get_project("P-1001")
        assert view.staff.name == "Bob"

    @pytest.mark.asyncio
    async def test_delete(self, uow, count_rows):
        await self.service.create_project_with_details(uow, make_descriptor())

        assert await self.service.delete_project(uow, "P-1001") is True
        assert await self.service.delete_project(uow, "P-1001") is False
        assert await count_rows(Project) == 0
        # Catalog rows outlive the project
        assert await count_rows(Staff) == 1

        with pytest.raises(NotFoundError):
            await self.service.get_project("P-1001")


class TestReadPaths:

    def setup_method(self):
        self.service = ProjectService()

    @pytest.mark.asyncio
    async def test_negative_stored_price_reads_as_zero(self, uow):
        await self.service.create_project_with_details(uow, make_descriptor())

        async with database.async_session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(Project)
                    .where(Project.project_number == "P-1001")
                    .values(total_price=Decimal("-250.00"))
                )

        view = await self.service.get_project("P-1001")
        assert view.total_price == Decimal("0")
        listed = await self.service.list_projects()
        assert [p.total_price for p in listed] == [Decimal("0")]

    @pytest.mark.asyncio
    async def test_missing_relations_use_placeholders(self, db):
        async with database.async_session_factory() as session:
            async with session.begin():
                session.add(
                    Project(
                        project_number="P-0001",
                        name="Orphan",
                        start_date=date(2025, 1, 1),
                        end_date=date(2025, 1, 31),
                        total_price=Decimal("10.00"),
                    )
                )

        view = await self.service.get_project("P-0001")
        assert view.customer_name == "Unknown Customer"
        assert view.status_name == "No Status"
        assert view.service.name == "No Service"
        assert view.staff.name == "No Staff"
        assert view.staff.role_name == "N/A"
        assert view.description == "No description provided"

    @pytest.mark.asyncio
    async def test_list_statuses(self, db):
        statuses = await self.service.list_statuses()
        assert [(s.status_id, s.name) for s in statuses] == [
            (1, "New"),
            (2, "In Progress"),
            (3, "Completed"),
        ]
