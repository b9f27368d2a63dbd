"""Create drivers and trucks tables

Revision ID: 001
Revises: None
Create Date: 2024-03-02 00:00:00.000000+00:00

What:  Creates the `drivers` and `trucks` tables.
How:   Portable column types only (integer identity, VARCHAR, timestamptz), so
       the same revision runs on PostgreSQL and on SQLite in tests.

Rollback: downgrade() drops both tables (destructive: all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create both tables with their primary keys and unique licence numbers."""
    op.create_table(
        "drivers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("id_card_number", sa.String(50), nullable=False),
        sa.Column(
            "driver_license_number",
            sa.String(50),
            nullable=False,
            comment="Driving licence (SIM) number; unique per driver",
        ),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'active'"),
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "driver_license_number", name="uq_drivers_driver_license_number"
        ),
    )

    op.create_table(
        "trucks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "license_number",
            sa.String(20),
            nullable=False,
            comment="Number plate; unique across the fleet",
        ),
        sa.Column("truck_type", sa.String(50), nullable=False),
        sa.Column("license_type", sa.String(20), nullable=False),
        sa.Column("production_year", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'active'"),
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("license_number", name="uq_trucks_license_number"),
    )


def downgrade() -> None:
    """Drop both tables."""
    op.drop_table("trucks")
    op.drop_table("drivers")
