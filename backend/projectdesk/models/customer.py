"""Customer SQLAlchemy model (`customers` table)."""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from projectdesk.database import Base


class Customer(Base):
    """
    A customer that projects are delivered for.

    Lifecycle:
        Created by CustomerService.ensure_customer when no row matches the
        name, or by create_customer. Never deleted by the application.

    The name is unique by business rule only; the ensure resolver looks it
    up before inserting instead of relying on a storage constraint.
    """

    __tablename__ = "customers"

    customer_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    contact_person: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    def __repr__(self) -> str:
        return f"<Customer(customer_id={self.customer_id}, name='{self.name}')>"
