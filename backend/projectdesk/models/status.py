"""Status SQLAlchemy model (`statuses` table)."""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from projectdesk.database import Base


class Status(Base):
    """Project status. Read-only reference data seeded at init (New, In Progress, Completed)."""

    __tablename__ = "statuses"

    status_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Status(status_id={self.status_id}, name='{self.name}')>"
