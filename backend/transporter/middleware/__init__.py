# Middleware package init
"""
Transporter Backend — Middleware Package
==========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [CORS] → [GZip] → [Request ID] → [Logging] → [Timeouts] → Route Handler

    1. CORS outermost: every response, including timeouts, gets
       Access-Control-Allow-Origin
    2. Request ID: correlation ID for logs and error bodies
    3. Logging: access line with status and duration
    4. Timeouts innermost: read/write deadlines around the handler

    The order is reversed for responses.
"""
