"""
Projectdesk Backend — Project SQLAlchemy Model
================================================

What:  ORM model representing the `projects` table.
How:   The business project number is the primary key (not a surrogate int)
       and is immutable once created.

Foreign keys to customers, services, staff and statuses are nullable at the
storage level. The detailed-creation workflow resolves all of them before it
commits, so rows it writes always carry valid references.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projectdesk.database import Base
from projectdesk.models.customer import Customer
from projectdesk.models.service import Service
from projectdesk.models.staff import Staff
from projectdesk.models.status import Status


class Project(Base):
    """
    A customer project.

    Lifecycle:
        1. Created once by ProjectService.create_project_with_details
        2. Updated in place by ProjectService.update_project, which may
           re-resolve customer/service/staff from new descriptors
        3. Deleted by project number

    Query Patterns:
        - Get by number: primary key lookup
        - List: all rows with customer, service, staff/role and status
          loaded eagerly (selectinload) for the read views
    """

    __tablename__ = "projects"

    project_number: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    customer_id: Mapped[Optional[int]] = mapped_column(ForeignKey("customers.customer_id"), nullable=True)
    service_id: Mapped[Optional[int]] = mapped_column(ForeignKey("services.service_id"), nullable=True)
    staff_id: Mapped[Optional[int]] = mapped_column(ForeignKey("staff.staff_id"), nullable=True)
    status_id: Mapped[Optional[int]] = mapped_column(ForeignKey("statuses.status_id"), nullable=True)

    # Clamped to 0 on read if a negative value was written directly to storage
    total_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    customer: Mapped[Optional[Customer]] = relationship()
    service: Mapped[Optional[Service]] = relationship()
    staff: Mapped[Optional[Staff]] = relationship()
    status: Mapped[Optional[Status]] = relationship()

    def __repr__(self) -> str:
        return f"<Project(project_number='{self.project_number}', name='{self.name}')>"
