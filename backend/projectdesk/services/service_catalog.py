"""
Projectdesk Backend — Service Catalog
=======================================

What:  Ensure-or-create for billable services, and the service listing.

Price Contract:
    ensure_service() is an upsert by name, not a pure lookup. When a
    service with the requested name exists but its hourly price differs,
    the stored price is UPDATED to the requested one and the existing id is
    returned. No second row is ever created for the same name. Callers that
    only want to read a service must use list_services() instead.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from projectdesk import database
from projectdesk.exceptions import DatabaseError, ValidationError
from projectdesk.models import Service
from projectdesk.repositories import service_repository
from projectdesk.schemas.catalog import ServiceDescriptor, ServiceView
from projectdesk.services.ensure import EnsureOrCreate
from projectdesk.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ServiceCatalog:

    def __init__(self):
        self._ensure = EnsureOrCreate[ServiceDescriptor, Service](
            entity="Service",
            lookup=self._lookup,
            key_of=lambda service: service.service_id,
            insert=self._insert,
            is_stale=lambda service, descriptor: service.hourly_price != descriptor.hourly_price,
            update=self._update_price,
        )

    @staticmethod
    async def _lookup(uow: UnitOfWork, descriptor: ServiceDescriptor):
        async with uow.reader() as session:
            return await service_repository.find_by_name(session, descriptor.name)

    @staticmethod
    async def _insert(uow: UnitOfWork, descriptor: ServiceDescriptor) -> int:
        return await service_repository.insert(
            uow.session,
            Service(name=descriptor.name, hourly_price=descriptor.hourly_price),
        )

    @staticmethod
    async def _update_price(uow: UnitOfWork, service: Service, descriptor: ServiceDescriptor) -> None:
        logger.info(
            "Service %r price changes %s -> %s",
            service.name, service.hourly_price, descriptor.hourly_price,
        )
        await service_repository.update_fields(
            uow.session, service.service_id, hourly_price=descriptor.hourly_price
        )

    async def ensure_service(self, uow: UnitOfWork, descriptor: Optional[ServiceDescriptor]) -> int:
        """
        Return the id of the service named in `descriptor`, creating it or
        updating its hourly price as needed (see module docstring).

        Raises:
            ValidationError: Missing descriptor, empty name or negative price.
        """
        if descriptor is None:
            raise ValidationError(message="Service details cannot be empty.", field="service")
        if not descriptor.name:
            raise ValidationError(message="Service name is required.", field="service.name")
        if descriptor.hourly_price < Decimal("0"):
            raise ValidationError(
                message="Hourly price cannot be negative.",
                field="service.hourly_price",
            )

        logger.debug("Ensuring service %r at %s", descriptor.name, descriptor.hourly_price)
        return await self._ensure(uow, descriptor)

    async def list_services(self) -> List[ServiceView]:
        try:
            services = await database.run_read(service_repository.list_all)
        except SQLAlchemyError as e:
            logger.error("Database error listing services: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve services. Please try again.")
        return [ServiceView.model_validate(service) for service in services]


service_catalog = ServiceCatalog()
