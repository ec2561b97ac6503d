"""
Projectdesk Backend — Catalog Ensure Routes
=============================================

What:  Find-or-create endpoints for roles, services, staff and customers.
How:   Each call runs in its own transaction, owned by the resolver, and
       returns the key of the row it found or created.
"""

from fastapi import APIRouter, Depends

from projectdesk.database import get_unit_of_work
from projectdesk.schemas.catalog import (
    CustomerDescriptor,
    EnsureResponse,
    RoleDescriptor,
    ServiceDescriptor,
    StaffDescriptor,
)
from projectdesk.schemas.common import ErrorResponse
from projectdesk.services.customer_service import customer_service
from projectdesk.services.role_service import role_service
from projectdesk.services.service_catalog import service_catalog
from projectdesk.services.staff_service import staff_service
from projectdesk.unit_of_work import UnitOfWork

router = APIRouter(prefix="/api", tags=["Catalog"])

_ERRORS = {400: {"description": "Missing or invalid fields", "model": ErrorResponse}}


@router.post("/roles/ensure", response_model=EnsureResponse, responses=_ERRORS, summary="Find or create a role")
async def ensure_role(body: RoleDescriptor, uow: UnitOfWork = Depends(get_unit_of_work)) -> EnsureResponse:
    return EnsureResponse(id=await role_service.ensure_role(uow, body.name))


@router.post(
    "/services/ensure",
    response_model=EnsureResponse,
    responses=_ERRORS,
    summary="Find or create a service",
    description="An existing service whose hourly price differs is updated to the requested price.",
)
async def ensure_service(body: ServiceDescriptor, uow: UnitOfWork = Depends(get_unit_of_work)) -> EnsureResponse:
    return EnsureResponse(id=await service_catalog.ensure_service(uow, body))


@router.post(
    "/staff/ensure",
    response_model=EnsureResponse,
    responses=_ERRORS,
    summary="Find or create a staff member (and its role)",
)
async def ensure_staff(body: StaffDescriptor, uow: UnitOfWork = Depends(get_unit_of_work)) -> EnsureResponse:
    return EnsureResponse(id=await staff_service.ensure_staff(uow, body))


@router.post("/customers/ensure", response_model=EnsureResponse, responses=_ERRORS, summary="Find or create a customer")
async def ensure_customer(body: CustomerDescriptor, uow: UnitOfWork = Depends(get_unit_of_work)) -> EnsureResponse:
    return EnsureResponse(id=await customer_service.ensure_customer(uow, body.name, body.contact_person))
