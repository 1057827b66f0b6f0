"""
MindEase Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for each error category the API reports.
How:   Each exception carries a user-facing message and an optional context dict.
       Global exception handlers (registered in main.py) map them to HTTP
       status codes and structured JSON bodies.
Who:   Raised by the storage adapter, services, and routes.

Exception Hierarchy:
    MindEaseError (base)
    ├── ValidationError              → 400 (missing/blank field, bad upload)
    ├── NotFoundError                → 404 (or the status chosen by the endpoint)
    ├── ConflictError                → 400 (duplicate email)
    ├── AuthError                    → 400 (login failed)
    ├── FileStorageError             → 500
    └── DataAccessError              → 500 (generic message, details logged)
        └── ConstraintViolationError → 500 unless a service translates it

The context dict is logged server-side and never returned for 5xx errors.
"""

from typing import Any, Dict, Optional


class MindEaseError(Exception):
    """
    Base exception for all MindEase application errors.

    Attributes:
        message:  User-facing error description
        context:  Additional debug info (logged, not returned for 5xx)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = dict(context or {})
        super().__init__(self.message)


class ValidationError(MindEaseError):
    """
    Raised when client input fails a presence or upload check.

    HTTP: 400 Bad Request. FastAPI's own schema errors (422) are remapped to
    400 as well, so every input problem has the same status.
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(MindEaseError):
    """
    Raised when a referenced user or discussion does not exist.

    The storage adapter returns None for missing records; services convert
    that into NotFoundError. Endpoints that historically answered 400 for a
    missing record pass status_code=400.
    """

    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        status_code: int = 404,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = dict(context or {})
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class ConflictError(MindEaseError):
    """Raised when a create would violate uniqueness (duplicate email)."""

    status_code = 400
    error_code = "conflict"

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthError(MindEaseError):
    """
    Raised when login credentials do not match.

    HTTP: 400. Unknown email and wrong password share one message.
    """

    status_code = 400
    error_code = "auth_error"

    def __init__(
        self,
        message: str = "Invalid email or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(MindEaseError):
    """Raised when an uploaded file cannot be written to the upload directory."""

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DataAccessError(MindEaseError):
    """
    Raised when a storage operation fails.

    What:    A query, insert, or update failed, the connection was lost, the
             pool timed out, or an aggregation could not resolve a record.
    HTTP:    500 with a generic message. The SQL error, constraint name, or
             missing id stays in the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConstraintViolationError(DataAccessError):
    """Raised by the storage adapter when an integrity constraint rejects a write."""

    def __init__(
        self,
        message: str = "A database constraint was violated.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
