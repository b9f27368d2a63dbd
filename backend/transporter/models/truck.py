"""
Transporter Backend — Truck SQLAlchemy Model
==============================================

What:  ORM model representing the `trucks` table.
Who:   Used by TruckService for CRUD operations and by Alembic for schema management.

Column notes:
    - license_number: the number plate, unique across the fleet
    - license_type: plate colour class ('black' private, 'yellow' commercial)
    - truck_type: free-form body type (tronton, CDE, CDD, wingbox, ...)
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from transporter.database import Base
from transporter.models.driver import _utcnow


class Truck(Base):
    """A truck owned or operated by the transporter."""

    __tablename__ = "trucks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    license_number: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        comment="Number plate; unique across the fleet",
    )

    truck_type: Mapped[str] = mapped_column(String(50), nullable=False)

    license_type: Mapped[str] = mapped_column(String(20), nullable=False)

    production_year: Mapped[int] = mapped_column(Integer, nullable=False)

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
        return (
            f"<Truck(id={self.id}, license_number='{self.license_number}', "
            f"status='{self.status}')>"
        )
