"""Role SQLAlchemy model (`roles` table)."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from projectdesk.database import Base


class Role(Base):
    """A staff role, e.g. "Developer". Created by RoleService.ensure_role."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True, unique=True)

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name='{self.name}')>"
