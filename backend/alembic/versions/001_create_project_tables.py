"""Create project tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates roles, statuses, services, customers, staff and projects, and
       seeds the reference statuses.

Rollback: downgrade() drops all six tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = ("New", "In Progress", "Completed")


def upgrade() -> None:
    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_roles_name", "roles", ["name"], unique=True)

    statuses = op.create_table(
        "statuses",
        sa.Column("status_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=True),
        sa.PrimaryKeyConstraint("status_id"),
    )

    op.create_table(
        "services",
        sa.Column("service_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "hourly_price",
            sa.Numeric(18, 2),
            nullable=False,
            server_default=sa.text("0.00"),
            comment="Hourly price; ensure_service overwrites it when a caller asks for a different one",
        ),
        sa.PrimaryKeyConstraint("service_id"),
    )
    op.create_index("ix_services_name", "services", ["name"], unique=True)

    op.create_table(
        "customers",
        sa.Column("customer_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("contact_person", sa.String(200), nullable=True),
        sa.PrimaryKeyConstraint("customer_id"),
    )
    op.create_index("ix_customers_name", "customers", ["name"])

    # Staff identity is (name, role): the same name may exist once per role
    op.create_table(
        "staff",
        sa.Column("staff_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("roles.id"), nullable=False),
        sa.PrimaryKeyConstraint("staff_id"),
    )
    op.create_index("idx_staff_name_role", "staff", ["name", "role_id"], unique=True)

    op.create_table(
        "projects",
        sa.Column(
            "project_number",
            sa.String(50),
            nullable=False,
            comment="Business key; immutable once created",
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.customer_id"), nullable=True),
        sa.Column("service_id", sa.Integer(), sa.ForeignKey("services.service_id"), nullable=True),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.staff_id"), nullable=True),
        sa.Column("status_id", sa.Integer(), sa.ForeignKey("statuses.status_id"), nullable=True),
        sa.Column("total_price", sa.Numeric(18, 2), nullable=False, server_default=sa.text("0.00")),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("project_number"),
    )

    op.bulk_insert(statuses, [{"name": name} for name in STATUSES])


def downgrade() -> None:
    op.drop_table("projects")
    op.drop_index("idx_staff_name_role", table_name="staff")
    op.drop_table("staff")
    op.drop_index("ix_customers_name", table_name="customers")
    op.drop_table("customers")
    op.drop_index("ix_services_name", table_name="services")
    op.drop_table("services")
    op.drop_table("statuses")
    op.drop_index("ix_roles_name", table_name="roles")
    op.drop_table("roles")
