"""
Transporter Backend — Truck Service
=====================================

What:  List, fetch, create and update trucks.
Who:   Called by the /api/v1/truck(s) route handlers.
"""

from transporter.models.truck import Truck
from transporter.schemas.truck import TruckResponse
from transporter.services.base import ResourceService


class TruckService(ResourceService):
    model = Truck
    response_schema = TruckResponse
    resource_name = "truck"
    unique_field = "license_number"


truck_service = TruckService()
