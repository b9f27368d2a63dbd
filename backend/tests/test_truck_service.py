"""
Transporter Backend — Truck Service Unit Tests
================================================

What:  TruckService-specific behaviour on top of the shared ResourceService
       workflow (covered in depth by test_driver_service.py).
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

from transporter.exceptions import ConflictError, NotFoundError
from transporter.models.truck import Truck
from transporter.schemas.truck import TruckCreate, TruckUpdate
from transporter.services.truck_service import TruckService


class TestTruckService:

    def setup_method(self):
        self.service = TruckService()

    @pytest.mark.asyncio
    async def test_get_found(self, mock_db_session, truck_payload):
        now = datetime.now(timezone.utc)
        row = Truck(id=5, created_at=now, updated_at=now, status="active", **truck_payload)
        result = MagicMock()
        result.scalar_one_or_none.return_value = row
        mock_db_session.execute.return_value = result

        truck = await self.service.get(mock_db_session, 5)

        assert truck.id == 5
        assert truck.license_number == "B 9123 KXA"
        assert truck.production_year == 2019

    @pytest.mark.asyncio
    async def test_update_missing_truck(self, mock_db_session, truck_payload):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = result

        with pytest.raises(NotFoundError, match="truck"):
            await self.service.update(mock_db_session, 1, TruckUpdate(**truck_payload))

    @pytest.mark.asyncio
    async def test_duplicate_plate_conflicts(self, mock_db_session, truck_payload):
        mock_db_session.flush = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("duplicate key"))
        )

        with pytest.raises(ConflictError) as excinfo:
            await self.service.create(mock_db_session, TruckCreate(**truck_payload))

        assert excinfo.value.field == "license_number"
        assert "license_number" in excinfo.value.message


class TestTruckSchema:

    def test_unknown_license_type_rejected(self, truck_payload):
        with pytest.raises(PydanticValidationError):
            TruckCreate(**{**truck_payload, "license_type": "green"})

    def test_production_year_bounds(self, truck_payload):
        with pytest.raises(PydanticValidationError):
            TruckCreate(**{**truck_payload, "production_year": 1850})

    def test_plate_whitespace_stripped(self, truck_payload):
        truck = TruckCreate(**{**truck_payload, "license_number": "  B 1 XY  "})
        assert truck.license_number == "B 1 XY"
