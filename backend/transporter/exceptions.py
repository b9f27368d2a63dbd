"""
Transporter Backend — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the failure modes the service knows about.
Why:   Services raise domain errors; global handlers in main.py turn them into
       JSON responses with the right status code. Startup errors carry enough
       context for the entry point to log them before exiting.
How:   Each exception carries a message and an optional context dict. The
       context is logged but never returned to the client.

Exception Hierarchy:
    TransporterError (base)
    ├── NotFoundError        → 404 Not Found
    ├── ConflictError        → 409 Conflict (unique licence number taken)
    ├── DatabaseError        → 500 Internal Server Error / fatal at startup
    ├── ConfigurationError   → fatal at startup (missing/invalid env key)
    └── ServerStartupError   → fatal at startup (listener could not bind)
"""

from typing import Any, Dict, Optional


class TransporterError(Exception):
    """
    Base exception for all Transporter application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(TransporterError):
    """
    Raised when a requested resource does not exist.

    When:    GET or PUT /api/v1/driver/{id} with an id that has no row.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records; services convert that None
    into this exception so routes never return 200 with a null body.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class ConflictError(TransporterError):
    """
    Raised when a write collides with a unique constraint.

    When:    Creating or updating a driver/truck with a licence number that
             another row already holds.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The resource conflicts with an existing record",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(TransporterError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, store unreachable at startup, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The driver error is
    kept in `context` for the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(TransporterError):
    """
    Raised when the environment does not hold a usable configuration.

    When:    A required key is absent or a value fails validation.
    Effect:  Fatal. The process exits with status 1 before opening any
             database connection or listening socket.
    """

    def __init__(
        self,
        message: str = "Configuration validation failed",
        key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if key:
            ctx["key"] = key
        super().__init__(message=message, context=ctx)
        self.key = key

    @classmethod
    def from_validation_error(cls, exc) -> "ConfigurationError":
        """
        Build an error from a pydantic ValidationError, naming the first bad key.

        Pydantic reports errors in field declaration order, so the first entry
        is the first required key in check order that is missing or invalid.
        """
        errors = exc.errors()
        if not errors:
            return cls()
        first = errors[0]
        key = str(first["loc"][0]).upper() if first.get("loc") else "UNKNOWN"
        if first.get("type") == "missing":
            message = f"{key} value does not exist"
        else:
            message = f"{key} value is invalid: {first.get('msg', 'invalid value')}"
        return cls(message=message, key=key, context={"error_count": len(errors)})


class ServerStartupError(TransporterError):
    """
    Raised when the HTTP listener cannot be started.

    When:    Port already bound, permission denied, unresolvable host.
    Effect:  Fatal. Logged and the process exits with status 1 immediately.
    """

    def __init__(
        self,
        message: str = "Could not start the HTTP listener",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
