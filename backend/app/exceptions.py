"""
TIL Backend — Exception Hierarchy
==================================

What:  Application errors raised by services, auth dependencies and middleware.
How:   Every class declares the HTTP status and the machine-readable `error`
       code it maps to. main.py turns any TILError into the JSON envelope
       {error, message, details?, request_id} using those two attributes.

Hierarchy:
    TILError (base)                 500  server_error
    ├── ValidationError             400  validation_error
    ├── UnauthorizedError           401  unauthorized
    ├── NotFoundError               404  not_found
    ├── ConflictError               409  conflict
    ├── RateLimitExceededError      429  rate_limit_exceeded
    └── DatabaseError               500  server_error (message never exposed)
"""

from typing import Any, Dict, Optional


class TILError(Exception):
    """
    Base class for all application errors.

    Attributes:
        message:  Client-safe description, returned in the response body
        context:  Structured detail; returned as `details` unless the
                  handler for the subclass hides it
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = dict(context or {})
        super().__init__(message)


class _FieldError(TILError):
    """A TILError about one named input field, echoed as details.field."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.field = field
        if field:
            self.context["field"] = field


class ValidationError(_FieldError):
    """
    Client input is malformed in a way the schema cannot express,
    e.g. a blank search term.

    FastAPI's own RequestValidationError (missing body field, non-integer
    id) is rendered with the same `validation_error` code.
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str = "Validation failed", field: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, field=field, context=context)


class UnauthorizedError(TILError):
    """
    Missing or invalid credentials.

    `scheme` is sent back as the WWW-Authenticate challenge: "Bearer" for
    protected routes, "Basic" for login.
    """

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Authentication required",
        scheme: str = "Bearer",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.scheme = scheme


class NotFoundError(TILError):
    """An id from the path or body resolves to no row."""

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        else:
            message = f"No {resource} was found"
        super().__init__(message=message, context=context)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(_FieldError):
    """A write would break a uniqueness rule (username, category name)."""

    status_code = 409
    error_code = "conflict"

    def __init__(self, message: str = "The resource already exists",
                 field: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, field=field, context=context)


class RateLimitExceededError(TILError):
    """Per-IP request budget spent; retry after `retry_after` seconds."""

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(self, retry_after: int = 60):
        super().__init__(
            message=f"Too many requests. Retry in {retry_after} seconds.",
            context={"retry_after": retry_after},
        )
        self.retry_after = retry_after


class DatabaseError(TILError):
    """
    A query or write failed inside a service.

    The message and context are for the server log. Clients only ever see
    a generic 500 body.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
