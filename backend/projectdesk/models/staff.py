"""Staff SQLAlchemy model (`staff` table)."""

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projectdesk.database import Base
from projectdesk.models.role import Role


class Staff(Base):
    """
    A staff member holding one role.

    Natural identity is the (name, role_id) pair: the same person name under
    two roles is two rows. Created by StaffService.ensure_staff only after
    the role has been ensured.
    """

    __tablename__ = "staff"

    staff_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role_id: Mapped[int] = mapped_column(ForeignKey("roles.id"), nullable=False)

    role: Mapped[Role] = relationship()

    __table_args__ = (
        Index("idx_staff_name_role", "name", "role_id", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Staff(staff_id={self.staff_id}, name='{self.name}', role_id={self.role_id})>"
