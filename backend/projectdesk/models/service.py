"""Service SQLAlchemy model (`services` table)."""

from decimal import Decimal

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from projectdesk.database import Base


class Service(Base):
    """
    A billable service with an hourly price.

    Identity is the name alone. hourly_price is mutable metadata: an ensure
    call with a different price updates this row in place rather than
    creating a second version.
    """

    __tablename__ = "services"

    service_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True, unique=True)
    hourly_price: Mapped[Decimal] = mapped_column(
        Numeric(18, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    def __repr__(self) -> str:
        return f"<Service(service_id={self.service_id}, name='{self.name}', hourly_price={self.hourly_price})>"
