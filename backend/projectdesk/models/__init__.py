"""
Projectdesk Backend — ORM Models
==================================

Importing this package registers every table on Base.metadata
(used by database.init_models() and Alembic autogenerate).
"""

from projectdesk.models.customer import Customer
from projectdesk.models.project import Project
from projectdesk.models.role import Role
from projectdesk.models.service import Service
from projectdesk.models.staff import Staff
from projectdesk.models.status import Status

__all__ = ["Customer", "Project", "Role", "Service", "Staff", "Status"]
