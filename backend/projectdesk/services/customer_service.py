"""
Projectdesk Backend — Customer Service
========================================

What:  Ensure-or-create and strict create for customers, existence check,
       customer listing.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from projectdesk import database
from projectdesk.config import settings
from projectdesk.exceptions import DatabaseError, ValidationError
from projectdesk.models import Customer
from projectdesk.repositories import customer_repository
from projectdesk.schemas.catalog import CustomerDescriptor, CustomerView
from projectdesk.services.ensure import EnsureOrCreate, owned_transaction
from projectdesk.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CustomerService:

    def __init__(self):
        self._ensure = EnsureOrCreate[CustomerDescriptor, Customer](
            entity="Customer",
            lookup=self._lookup,
            key_of=lambda customer: customer.customer_id,
            insert=self._insert,
        )

    @staticmethod
    async def _lookup(uow: UnitOfWork, descriptor: CustomerDescriptor):
        async with uow.reader() as session:
            return await customer_repository.find_by_name(session, descriptor.name)

    @staticmethod
    async def _insert(uow: UnitOfWork, descriptor: CustomerDescriptor) -> int:
        return await customer_repository.insert(
            uow.session,
            Customer(name=descriptor.name, contact_person=descriptor.contact_person),
        )

    async def ensure_customer(
        self,
        uow: UnitOfWork,
        name: str,
        contact_person: Optional[str] = None,
    ) -> int:
        """
        Return the id of the customer called `name`, creating it if needed.

        An existing customer is returned as-is; contact_person is only used
        (or defaulted to settings.default_contact_person) for a new row.

        Raises:
            ValidationError: The name is empty.
        """
        descriptor = CustomerDescriptor(name=name or "", contact_person=contact_person)
        if not descriptor.name:
            raise ValidationError(message="Customer name cannot be empty.", field="customer.name")
        if descriptor.contact_person is None:
            descriptor = descriptor.model_copy(
                update={"contact_person": settings.default_contact_person}
            )

        logger.debug("Ensuring customer %r", descriptor.name)
        return await self._ensure(uow, descriptor)

    async def create_customer(self, uow: UnitOfWork, descriptor: Optional[CustomerDescriptor]) -> int:
        """
        Insert a new customer unconditionally.

        Raises:
            ValidationError: Missing descriptor, name or contact person.
        """
        if descriptor is None:
            raise ValidationError(message="Customer details cannot be empty.", field="customer")
        if not descriptor.name:
            raise ValidationError(message="Customer name is required.", field="customer.name")
        if not descriptor.contact_person:
            raise ValidationError(
                message="Customer contact person is required.",
                field="customer.contact_person",
            )

        async with owned_transaction(uow, "create customer"):
            customer_id = await self._insert(uow, descriptor)

        logger.info("Customer %r created with id %d", descriptor.name, customer_id)
        return customer_id

    async def customer_exists(self, customer_id: int) -> bool:
        customer = await database.run_read(lambda session: customer_repository.find_by_id(session, customer_id))
        return customer is not None

    async def list_customers(self) -> List[CustomerView]:
        try:
            customers = await database.run_read(customer_repository.list_all)
        except SQLAlchemyError as e:
            logger.error("Database error listing customers: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve customers. Please try again.")
        return [CustomerView.model_validate(customer) for customer in customers]


customer_service = CustomerService()
