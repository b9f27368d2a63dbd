"""
Transporter Backend — Driver Service
======================================

What:  List, fetch, create and update drivers.
Who:   Called by the /api/v1/driver(s) route handlers.
"""

from transporter.models.driver import Driver
from transporter.schemas.driver import DriverResponse
from transporter.services.base import ResourceService


class DriverService(ResourceService):
    """CRUD for drivers; licence numbers are unique."""

    model = Driver
    response_schema = DriverResponse
    resource_name = "driver"
    unique_field = "driver_license_number"


# Stateless; one instance is shared by all requests
driver_service = DriverService()
