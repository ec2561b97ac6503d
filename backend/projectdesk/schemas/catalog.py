"""
Projectdesk Backend — Catalog Schemas (Role, Service, Staff, Customer, Status)
================================================================================

What:  Descriptors accepted by the ensure resolvers and the views returned by
       the catalog list endpoints.

Normalization:
    Every string field is stripped of surrounding whitespace
    (str_strip_whitespace). Names are natural keys, so " Developer " and
    "Developer" resolve to the same role for both lookup and insert.
    Required-ness is checked by the services (ValidationError → 400), not
    here, so a descriptor with an empty name can still be constructed and
    rejected with a domain error.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from projectdesk.config import settings


_DESCRIPTOR_CONFIG = {"str_strip_whitespace": True}


# ══════════════════════════════════════════════════════════════════════════
# Descriptors: what callers send to the ensure resolvers
# ══════════════════════════════════════════════════════════════════════════


class RoleDescriptor(BaseModel):
    name: str = Field(default="", description="Role name (natural key)")

    model_config = _DESCRIPTOR_CONFIG


class ServiceDescriptor(BaseModel):
    """
    What:  Finds or creates a service by name.

    A price different from the stored one updates the existing service in
    place (see ServiceCatalog.ensure_service).
    """
    name: str = Field(default="", description="Service name (natural key)")
    hourly_price: Decimal = Field(
        default_factory=lambda: settings.default_hourly_price,
        description="Hourly price, >= 0; settings.default_hourly_price when omitted",
    )

    model_config = _DESCRIPTOR_CONFIG


class StaffDescriptor(BaseModel):
    """Finds or creates a staff member by (name, role); the role is ensured first."""
    name: str = Field(default="", description="Staff member name")
    role_name: str = Field(default="", description="Role name, created if missing")

    model_config = _DESCRIPTOR_CONFIG


class CustomerDescriptor(BaseModel):
    name: str = Field(default="", description="Customer name (natural key)")
    contact_person: Optional[str] = Field(
        default=None,
        description="Contact person; a default placeholder is stored when omitted",
    )

    model_config = _DESCRIPTOR_CONFIG

    @field_validator("contact_person")
    @classmethod
    def blank_contact_is_missing(cls, v: Optional[str]) -> Optional[str]:
        return v or None


# ══════════════════════════════════════════════════════════════════════════
# Views: what the read paths return
# ══════════════════════════════════════════════════════════════════════════


class RoleView(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class ServiceView(BaseModel):
    service_id: int = 0
    name: str
    hourly_price: Decimal

    model_config = {"from_attributes": True}


class StaffView(BaseModel):
    staff_id: int = 0
    name: str
    role_name: str


class CustomerView(BaseModel):
    customer_id: int
    name: str
    contact_person: Optional[str] = None

    model_config = {"from_attributes": True}


class StatusView(BaseModel):
    status_id: int
    name: Optional[str] = None

    model_config = {"from_attributes": True}


class EnsureResponse(BaseModel):
    """Key of the row an ensure call found or created."""
    id: int = Field(description="Identity key of the resolved entity")
