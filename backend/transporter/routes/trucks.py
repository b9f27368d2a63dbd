"""
Transporter Backend — Truck Route Handlers
============================================

What:  HTTP surface for trucks under /api/v1.

    GET  /api/v1/trucks        list trucks
    GET  /api/v1/truck/{id}    get truck by id
    POST /api/v1/truck         create truck
    PUT  /api/v1/truck/{id}    update truck

The single-truck lookup is served on GET; PUT on the same path is the update.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from transporter.database import get_db_session
from transporter.schemas.common import ErrorResponse, ResourceId
from transporter.schemas.truck import TruckCreate, TruckResponse, TruckUpdate
from transporter.services.truck_service import truck_service

router = APIRouter(prefix="/api/v1", tags=["Trucks"])


@router.get(
    "/trucks",
    response_model=List[TruckResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all trucks",
)
async def list_trucks(db: AsyncSession = Depends(get_db_session)) -> List[TruckResponse]:
    return await truck_service.list(db)


@router.get(
    "/truck/{truck_id}",
    response_model=TruckResponse,
    responses={
        404: {"description": "Truck not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single truck by ID",
)
async def get_truck(
    truck_id: ResourceId,
    db: AsyncSession = Depends(get_db_session),
) -> TruckResponse:
    return await truck_service.get(db, truck_id)


@router.post(
    "/truck",
    response_model=TruckResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "Number plate already registered", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Register a new truck",
)
async def create_truck(
    payload: TruckCreate,
    db: AsyncSession = Depends(get_db_session),
) -> TruckResponse:
    return await truck_service.create(db, payload)


@router.put(
    "/truck/{truck_id}",
    response_model=TruckResponse,
    responses={
        404: {"description": "Truck not found", "model": ErrorResponse},
        409: {"description": "Number plate already registered", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update an existing truck",
)
async def update_truck(
    truck_id: ResourceId,
    payload: TruckUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> TruckResponse:
    """Replace a truck's fields; 404 for an unknown id, never an insert."""
    return await truck_service.update(db, truck_id, payload)
