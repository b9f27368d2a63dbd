# Routes package init
"""
Transporter Backend — API Routes Package
==========================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource.

Route Inventory:
    - drivers.py: GET  /api/v1/drivers
                  GET  /api/v1/driver/{id}
                  POST /api/v1/driver
                  PUT  /api/v1/driver/{id}
    - trucks.py:  GET  /api/v1/trucks
                  GET  /api/v1/truck/{id}
                  POST /api/v1/truck
                  PUT  /api/v1/truck/{id}
    - health.py:  GET  /health

Design Principle:
    Routes are THIN: parse the request, call the service, let FastAPI
    serialize the result. Not-found and conflict handling lives in services.
"""
