"""
RestBuddy: Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions raised by the dispatcher and registry.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) map them to
       structured JSON error responses with the right HTTP status code.
Who:   Raised by the registry and the dispatcher; caught by global handlers.

Exception Hierarchy:
    RestBuddyError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── UnsupportedRequestError  → 405 Method Not Allowed
    └── UnknownResourceError     → 500 Internal Server Error

Not every failure is an exception: a show request for a missing record
answers 404 directly from the dispatcher. Errors raised by SQLAlchemy are
never wrapped; they reach their own handler unchanged.
"""

from typing import Any, Dict, Optional


class RestBuddyError(Exception):
    """
    Base exception for all RestBuddy application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only as `details`
                  where the handler chooses to)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RestBuddyError):
    """
    Raised when a request value cannot be used as given.

    When:    A filter or body value does not convert to the column type,
             or an update body is not a JSON object.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(RestBuddyError):
    """
    Raised when an update targets a record that does not exist.

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource = resource


class UnsupportedRequestError(RestBuddyError):
    """
    Raised when the method/route combination has no implemented operation.

    When:    Create, destroy, or a combination the classifier does not know.
             Create and destroy are classified but deliberately not served;
             the dispatcher only reads and updates existing records.
    HTTP:    405 Method Not Allowed
    """

    def __init__(
        self,
        request_type: str = "unknown",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["request_type"] = request_type
        super().__init__(message="Unknown request type", context=ctx)
        self.request_type = request_type


class UnknownResourceError(RestBuddyError):
    """
    Raised when a resource name is not present in the registry.

    When:    A route was wired for a resource that was never registered.
    HTTP:    500 Internal Server Error (server misconfiguration)
    """

    def __init__(
        self,
        resource: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        super().__init__(message=f"Unknown resource '{resource}'", context=ctx)
        self.resource = resource
