"""
Transporter Backend — Driver Route Handlers
=============================================

What:  HTTP surface for drivers under /api/v1.
How:   Path ids must be integers in the INTEGER key range (422 if not), bodies are
       validated against the driver schemas (422 if malformed), and the work
       is delegated to DriverService.

    GET  /api/v1/drivers        list drivers
    GET  /api/v1/driver/{id}    get driver by id
    POST /api/v1/driver         create driver
    PUT  /api/v1/driver/{id}    update driver
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from transporter.database import get_db_session
from transporter.schemas.common import ErrorResponse, ResourceId
from transporter.schemas.driver import DriverCreate, DriverResponse, DriverUpdate
from transporter.services.driver_service import driver_service

router = APIRouter(prefix="/api/v1", tags=["Drivers"])


@router.get(
    "/drivers",
    response_model=List[DriverResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all drivers",
)
async def list_drivers(db: AsyncSession = Depends(get_db_session)) -> List[DriverResponse]:
    return await driver_service.list(db)


@router.get(
    "/driver/{driver_id}",
    response_model=DriverResponse,
    responses={
        404: {"description": "Driver not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single driver by ID",
)
async def get_driver(
    driver_id: ResourceId,
    db: AsyncSession = Depends(get_db_session),
) -> DriverResponse:
    return await driver_service.get(db, driver_id)


@router.post(
    "/driver",
    response_model=DriverResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "Licence number already registered", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Register a new driver",
)
async def create_driver(
    payload: DriverCreate,
    db: AsyncSession = Depends(get_db_session),
) -> DriverResponse:
    """
    Create a driver and return it with its store-assigned id.

    Responds 201 Created; the returned id can be used with GET /driver/{id}.
    """
    return await driver_service.create(db, payload)


@router.put(
    "/driver/{driver_id}",
    response_model=DriverResponse,
    responses={
        404: {"description": "Driver not found", "model": ErrorResponse},
        409: {"description": "Licence number already registered", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update an existing driver",
)
async def update_driver(
    driver_id: ResourceId,
    payload: DriverUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> DriverResponse:
    """
    Replace a driver's fields.

    Not an upsert: an unknown id responds 404 and creates nothing.
    """
    return await driver_service.update(db, driver_id, payload)
