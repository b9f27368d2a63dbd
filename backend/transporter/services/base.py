"""
Transporter Backend — Resource Service Base Class
===================================================

What:  Shared list / get / create / update workflow for store-backed resources.
Why:   Drivers and trucks follow exactly the same CRUD contract; only the model,
       the response schema and the unique column differ.
How:   Subclasses set the class attributes below. Every method takes the
       request's AsyncSession; the service itself holds no state.
Who:   DriverService and TruckService; called by the route handlers.

Error Handling Strategy:
    - Missing row              → NotFoundError  (404)
    - Unique constraint broken → ConflictError  (409)
    - Any other store failure  → DatabaseError  (500, details logged only)
    Our own exceptions propagate unchanged.
"""

import logging
from abc import ABC
from typing import Any, ClassVar, List, Optional, Type

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from transporter.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    TransporterError,
)

logger = logging.getLogger(__name__)


class ResourceService(ABC):
    """
    CRUD operations for one resource type.

    Class attributes:
        model:           SQLAlchemy model class
        response_schema: Pydantic model built from a row (from_attributes)
        resource_name:   Human name used in error messages ("driver")
        unique_field:    Column whose uniqueness violations become 409s
    """

    model: ClassVar[Type[Any]]
    response_schema: ClassVar[Type[BaseModel]]
    resource_name: ClassVar[str] = "resource"
    unique_field: ClassVar[Optional[str]] = None

    async def list(self, db: AsyncSession) -> List[BaseModel]:
        """
        Return every row, ordered by id.

        No pagination, filtering or sorting options: the result is the whole
        table, which may be empty.
        """
        try:
            result = await db.execute(select(self.model).order_by(self.model.id))
            rows = result.scalars().all()
            return [self.response_schema.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error("Database error listing %ss: %s", self.resource_name, str(e))
            raise DatabaseError(
                message=f"Could not retrieve {self.resource_name}s. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get(self, db: AsyncSession, resource_id: int) -> BaseModel:
        """
        Return one row by id.

        Raises:
            NotFoundError: no row has this id (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        row = await self._fetch(db, resource_id)
        return self.response_schema.model_validate(row)

    async def create(self, db: AsyncSession, payload: BaseModel) -> BaseModel:
        """
        Insert a new row and return it with its store-assigned id.

        flush() sends the INSERT so the id and any constraint violation are
        known now; the commit happens when the request's session closes.
        """
        row = self.model(**payload.model_dump())
        try:
            db.add(row)
            await db.flush()
            await db.refresh(row)
        except SQLAlchemyError as e:
            raise self._translate(e, action="create")

        logger.info("Created %s %s", self.resource_name, row.id)
        return self.response_schema.model_validate(row)

    async def update(
        self, db: AsyncSession, resource_id: int, payload: BaseModel
    ) -> BaseModel:
        """
        Replace the mutable fields of an existing row.

        Not an upsert: a missing id raises NotFoundError and nothing is written.
        """
        row = await self._fetch(db, resource_id)
        for field, value in payload.model_dump().items():
            setattr(row, field, value)
        try:
            await db.flush()
            await db.refresh(row)
        except SQLAlchemyError as e:
            raise self._translate(e, action="update", resource_id=resource_id)

        logger.info("Updated %s %s", self.resource_name, resource_id)
        return self.response_schema.model_validate(row)

    # ── Internals ─────────────────────────────────────────────────────────

    async def _fetch(self, db: AsyncSession, resource_id: int) -> Any:
        try:
            result = await db.execute(
                select(self.model).where(self.model.id == resource_id)
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(
                "Database error fetching %s %s: %s", self.resource_name, resource_id, str(e)
            )
            raise DatabaseError(
                message=f"Could not retrieve the {self.resource_name}. Please try again.",
                context={f"{self.resource_name}_id": resource_id},
            )

        if row is None:
            raise NotFoundError(resource=self.resource_name, resource_id=resource_id)
        return row

    def _translate(
        self,
        error: SQLAlchemyError,
        action: str,
        resource_id: Optional[int] = None,
    ) -> TransporterError:
        """Map a failed write to the exception the route layer expects."""
        if isinstance(error, IntegrityError):
            logger.warning(
                "Integrity error on %s %s: %s", self.resource_name, action, str(error.orig)
            )
            field = self.unique_field
            message = f"A {self.resource_name} with this {field} already exists"
            if field is None:
                message = f"The {self.resource_name} conflicts with an existing record"
            return ConflictError(message=message, field=field)

        logger.error(
            "Database error during %s %s: %s", self.resource_name, action, str(error),
            exc_info=True,
        )
        context = {"action": action, "error_type": type(error).__name__}
        if resource_id is not None:
            context[f"{self.resource_name}_id"] = resource_id
        return DatabaseError(
            message=f"Could not {action} the {self.resource_name}. Please try again.",
            context=context,
        )
