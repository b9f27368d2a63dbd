"""
Transporter Backend — Truck Request/Response Schemas
======================================================

What:  Pydantic models defining the truck API contract.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

TruckStatus = Literal["active", "inactive"]

# Plate colour class: black for private, yellow for commercial vehicles
LicenseType = Literal["black", "yellow"]


class TruckBase(BaseModel):
    license_number: str = Field(
        min_length=1, max_length=20, description="Number plate (unique)"
    )
    truck_type: str = Field(
        min_length=1, max_length=50, description="Body type, e.g. tronton, CDE, CDD"
    )
    license_type: LicenseType = Field(description="Plate colour class: black or yellow")
    production_year: int = Field(ge=1900, le=2100, description="Year of manufacture")
    status: TruckStatus = Field(default="active", description="active or inactive")

    model_config = {"str_strip_whitespace": True}


class TruckCreate(TruckBase):
    """Body of POST /api/v1/truck."""


class TruckUpdate(TruckBase):
    """Body of PUT /api/v1/truck/{id}; replaces all mutable fields."""


class TruckResponse(TruckBase):
    id: int = Field(description="Store-assigned identifier")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
