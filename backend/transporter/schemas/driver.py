"""
Transporter Backend — Driver Request/Response Schemas
=======================================================

What:  Pydantic models defining the driver API contract.
Why:   Strict input validation, automatic serialization, and OpenAPI docs.
How:   FastAPI validates request bodies against DriverCreate/DriverUpdate
       (422 on failure) and serializes ORM rows through DriverResponse.

Schemas are separate from the SQLAlchemy model so the API never exposes
columns it does not mean to, and so request-side rules can differ from
database constraints.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

DriverStatus = Literal["active", "inactive"]


class DriverBase(BaseModel):
    """Fields shared by every driver representation."""
    name: str = Field(min_length=1, max_length=100, description="Full name")
    phone_number: str = Field(min_length=4, max_length=20, description="Contact phone number")
    id_card_number: str = Field(
        min_length=1, max_length=50, description="National identity card number"
    )
    driver_license_number: str = Field(
        min_length=1, max_length=50, description="Driving licence number (unique)"
    )
    status: DriverStatus = Field(default="active", description="active or inactive")

    model_config = {"str_strip_whitespace": True}


class DriverCreate(DriverBase):
    """
    What:  Body of POST /api/v1/driver.
    Note:  `id` is never accepted from the client; the store assigns it.
    """


class DriverUpdate(DriverBase):
    """
    What:  Body of PUT /api/v1/driver/{id}.
    Why full body: PUT replaces the mutable fields of an existing driver.
    """


class DriverResponse(DriverBase):
    """Full representation returned by every driver endpoint."""
    id: int = Field(description="Store-assigned identifier")
    created_at: datetime = Field(description="When the driver was created (UTC)")
    updated_at: datetime = Field(description="When the driver was last modified (UTC)")

    model_config = {"from_attributes": True}
