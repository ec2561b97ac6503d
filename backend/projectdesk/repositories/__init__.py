"""
Projectdesk Backend — Repositories (Data Access Layer)
========================================================

Each repository encapsulates the queries for one entity.

Convention:
    - Every method takes the AsyncSession to run on as its first argument.
      Services choose it: uow.reader() for lookups, uow.session for writes.
    - Writes add/flush only; they never commit. Commit and rollback belong
      to the UnitOfWork and to whichever service owns the transaction.
    - IntegrityError raised by a flush is translated to ConflictError.
"""

from projectdesk.repositories.customer import CustomerRepository, customer_repository
from projectdesk.repositories.project import ProjectRepository, project_repository
from projectdesk.repositories.role import RoleRepository, role_repository
from projectdesk.repositories.service import ServiceRepository, service_repository
from projectdesk.repositories.staff import StaffRepository, staff_repository
from projectdesk.repositories.status import StatusRepository, status_repository

__all__ = [
    "CustomerRepository",
    "ProjectRepository",
    "RoleRepository",
    "ServiceRepository",
    "StaffRepository",
    "StatusRepository",
    "customer_repository",
    "project_repository",
    "role_repository",
    "service_repository",
    "staff_repository",
    "status_repository",
]
