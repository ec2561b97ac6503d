"""
Projectdesk Backend — Project Schemas
=======================================

What:  Input descriptors for the create, detailed-creation and update
       workflows, and the read view of a project.

Required vs Optional (ProjectCreate / ProjectCreateDetailed):
    Required (checked by ProjectService, each a distinct ValidationError):
        project_number, name, service, staff, status_id > 0,
        total_price >= 0, start_date, end_date
    Customer:
        ProjectCreate: customer_id > 0 of an existing customer
        ProjectCreateDetailed: customer_id > 0, or customer with a non-empty name
    Defaulted here:
        description → settings.default_description when blank
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from projectdesk.config import settings
from projectdesk.schemas.catalog import (
    CustomerDescriptor,
    ServiceDescriptor,
    ServiceView,
    StaffDescriptor,
    StaffView,
)


def _default_description(v: Optional[str]) -> str:
    return v if v else settings.default_description


class ProjectCreate(BaseModel):
    """
    What:  A project for an existing customer; service and staff are resolved
           (find-or-create) in the same transaction.
    Who:   POST /api/projects; ProjectService.create_project.
    """
    project_number: str = Field(default="", description="Business key, unique and immutable")
    name: str = Field(default="")
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    customer_id: int = Field(default=0, description="Existing customer id")
    service: Optional[ServiceDescriptor] = None
    staff: Optional[StaffDescriptor] = None

    status_id: int = Field(default=0)
    total_price: Decimal = Field(default=Decimal("0.00"))
    description: str = Field(default="", validate_default=True)

    model_config = {"str_strip_whitespace": True}

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Optional[str]) -> str:
        return _default_description(v.strip() if isinstance(v, str) else v)


class ProjectCreateDetailed(ProjectCreate):
    """
    What:  Everything needed to create a project and resolve its dependencies,
           including a customer that may not exist yet.
    Who:   POST /api/projects/create-details; ProjectService.create_project_with_details.
    """
    customer_id: int = Field(default=0, description="Existing customer id; 0 to resolve by descriptor")
    customer: Optional[CustomerDescriptor] = None


class ProjectUpdate(BaseModel):
    """
    What:  Replacement values for an existing project.
    Who:   PUT /api/projects/{number}; ProjectService.update_project.

    The plain id fields are applied first; a supplied service, staff or
    customer descriptor is then resolved and overrides the matching id.
    """
    project_number: str = Field(default="")
    name: str = Field(default="")
    start_date: date
    end_date: date

    customer_id: Optional[int] = None
    service_id: Optional[int] = None
    staff_id: Optional[int] = None
    status_id: Optional[int] = None

    customer: Optional[CustomerDescriptor] = None
    service: Optional[ServiceDescriptor] = None
    staff: Optional[StaffDescriptor] = None

    total_price: Decimal = Field(default=Decimal("0.00"))
    description: str = Field(default="", validate_default=True)

    model_config = {"str_strip_whitespace": True}

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Optional[str]) -> str:
        return _default_description(v.strip() if isinstance(v, str) else v)


class ProjectView(BaseModel):
    """
    What:  Read projection of a project row and its resolved relations.
    Who:   GET /api/projects and GET /api/projects/{number}.

    total_price is never negative: a negative stored value reads as 0.
    """
    project_number: str
    name: str
    start_date: date
    end_date: date
    customer_id: int = 0
    customer_name: str
    contact_person: Optional[str] = None
    service_id: int = 0
    staff_id: int = 0
    status_id: int = 0
    status_name: str
    total_price: Decimal
    description: str
    service: ServiceView
    staff: StaffView


class ProjectCreatedResponse(BaseModel):
    message: str = Field(default="Project created successfully!")
    project_number: str
