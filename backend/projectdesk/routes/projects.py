"""
Projectdesk Backend — Project Route Handlers
==============================================

What:  Project CRUD and the lookup lists a project form needs.
How:   Writes receive the request's UnitOfWork (get_unit_of_work) and pass
       it to ProjectService; reads go straight to the services.

Path Ordering:
    The fixed lookup paths (/statuses, /services, ...) are declared before
    /{project_number} so they are never captured as a project number.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from projectdesk.database import get_unit_of_work
from projectdesk.exceptions import NotFoundError
from projectdesk.schemas.catalog import CustomerView, RoleView, ServiceView, StaffView, StatusView
from projectdesk.schemas.common import ErrorResponse
from projectdesk.schemas.project import (
    ProjectCreate,
    ProjectCreateDetailed,
    ProjectCreatedResponse,
    ProjectUpdate,
    ProjectView,
)
from projectdesk.services.customer_service import customer_service
from projectdesk.services.project_service import project_service
from projectdesk.services.role_service import role_service
from projectdesk.services.service_catalog import service_catalog
from projectdesk.services.staff_service import staff_service
from projectdesk.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.get("", response_model=List[ProjectView], summary="List all projects")
async def list_projects() -> List[ProjectView]:
    return await project_service.list_projects()


# ── Lookup Lists ──────────────────────────────────────────────────────────
@router.get("/statuses", response_model=List[StatusView], summary="List project statuses")
async def list_statuses() -> List[StatusView]:
    return await project_service.list_statuses()


@router.get("/services", response_model=List[ServiceView], summary="List billable services")
async def list_services() -> List[ServiceView]:
    return await service_catalog.list_services()


@router.get("/staff", response_model=List[StaffView], summary="List staff with their roles")
async def list_staff() -> List[StaffView]:
    return await staff_service.list_staff()


@router.get("/customers", response_model=List[CustomerView], summary="List customers")
async def list_customers() -> List[CustomerView]:
    return await customer_service.list_customers()


@router.get("/roles", response_model=List[RoleView], summary="List staff roles")
async def list_roles() -> List[RoleView]:
    return await role_service.list_roles()


@router.get(
    "/roles/{role_id}",
    response_model=RoleView,
    responses={404: {"description": "Role not found", "model": ErrorResponse}},
    summary="Get a single role by id",
)
async def get_role(role_id: int) -> RoleView:
    return await role_service.get_role(role_id)


# ── Writes ────────────────────────────────────────────────────────────────
@router.post(
    "",
    response_model=ProjectCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing or invalid project details", "model": ErrorResponse},
        409: {"description": "Project number already exists", "model": ErrorResponse},
        422: {"description": "Referenced customer or status does not exist", "model": ErrorResponse},
    },
    summary="Create a project for an existing customer",
    description=(
        "Creates the project and, in the same transaction, the service, role or "
        "staff member it names when they do not exist yet."
    ),
)
async def create_project(
    body: ProjectCreate,
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ProjectCreatedResponse:
    project_number = await project_service.create_project(uow, body)
    return ProjectCreatedResponse(project_number=project_number)


@router.post(
    "/create-details",
    response_model=ProjectCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing or invalid project details", "model": ErrorResponse},
        409: {"description": "Project number already exists", "model": ErrorResponse},
        422: {"description": "Referenced customer or status does not exist", "model": ErrorResponse},
    },
    summary="Create a project with its customer, service and staff",
    description=(
        "Creates the project and, in the same transaction, any customer, service, "
        "role or staff member it names that does not exist yet."
    ),
)
async def create_project_with_details(
    body: ProjectCreateDetailed,
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ProjectCreatedResponse:
    project_number = await project_service.create_project_with_details(uow, body)
    return ProjectCreatedResponse(project_number=project_number)


@router.get(
    "/{project_number}",
    response_model=ProjectView,
    responses={404: {"description": "Project not found", "model": ErrorResponse}},
    summary="Get a single project by number",
)
async def get_project(project_number: str) -> ProjectView:
    return await project_service.get_project(project_number)


@router.put(
    "/{project_number}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "Invalid project details", "model": ErrorResponse},
        404: {"description": "Project not found", "model": ErrorResponse},
    },
    summary="Update a project",
)
async def update_project(
    project_number: str,
    body: ProjectUpdate,
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Response:
    # The path identifies the project; the number itself is immutable
    body = body.model_copy(update={"project_number": project_number.strip()})
    await project_service.update_project(uow, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{project_number}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Project not found", "model": ErrorResponse}},
    summary="Delete a project",
)
async def delete_project(
    project_number: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Response:
    if not await project_service.delete_project(uow, project_number):
        raise NotFoundError(resource="project", resource_id=project_number)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
