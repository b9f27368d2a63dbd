# Services package init
"""
Transporter Backend — Services Layer
======================================

What:  Query logic sitting between routes (HTTP) and the database.
How:   Services receive the request's AsyncSession, run queries, and return
       response schemas or raise application exceptions.

Service Inventory:
    - ResourceService (base): shared list/get/create/update workflow
    - DriverService: drivers, unique on driver_license_number
    - TruckService: trucks, unique on license_number

Why services are separate from routes:
    Services can be unit-tested with a mocked session, without HTTP.
"""
