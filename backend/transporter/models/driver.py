"""
Transporter Backend — Driver SQLAlchemy Model
===============================================

What:  ORM model representing the `drivers` table.
Why:   Maps Python objects to database rows for type-safe database operations.
Who:   Used by DriverService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - Integer autoincrement primary key: assigned by the store, never by the client
    - driver_license_number: unique; two drivers cannot share a licence
    - status: 'active' | 'inactive' soft flag, since drivers are never deleted
    - created_at / updated_at: UTC, set by the application so they are
      available on the instance right after flush
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from transporter.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Driver(Base):
    """
    A truck driver registered with the transporter.

    Lifecycle:
        1. Created by POST /api/v1/driver
        2. Replaced field-by-field by PUT /api/v1/driver/{id}
        3. Never deleted; set status='inactive' instead
    """

    __tablename__ = "drivers"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)

    # National identity card number (KTP)
    id_card_number: Mapped[str] = mapped_column(String(50), nullable=False)

    driver_license_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        comment="Driving licence (SIM) number; unique per driver",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
        server_default=text("'active'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Driver(id={self.id}, name='{self.name}', status='{self.status}')>"
