"""
Jotter: Custom Exception Hierarchy
====================================

What:  Application-specific exceptions for the note handlers and stores.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       plain-text responses with the matching HTTP status code.
Who:   Raised by stores, form parsing and routes; caught by global handlers.

Exception Hierarchy:
    JotterError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── MethodNotAllowedError    → 405 Method Not Allowed
    └── StoreError               → 500 Internal Server Error (generic message)
"""

from typing import Any, Dict, Optional, Sequence


class JotterError(Exception):
    """
    Base exception for all Jotter application errors.

    Attributes:
        message:  User-facing error description (safe to return in a response)
        context:  Additional debug info (logged but NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(JotterError):
    """
    Raised when form or path input is missing or malformed.

    When:    Blank title on create/update, empty slug on delete.
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


class NotFoundError(JotterError):
    """
    Raised when no note matches the requested slug.

    When:    GET or POST /note/{slug} for a slug that is not stored.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class MethodNotAllowedError(JotterError):
    """
    Raised when a route is hit with an HTTP verb it does not accept.

    HTTP:    405 Method Not Allowed, with an Allow header listing `allowed`.
    """

    def __init__(
        self,
        method: str,
        allowed: Sequence[str] = ("POST",),
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["method"] = method
        super().__init__(message="Method not allowed", context=ctx)
        self.allowed = list(allowed)


class StoreError(JotterError):
    """
    Raised when the note store fails.

    When:    Connection lost, constraint violation, row mapping failure,
             slug retries exhausted.
    HTTP:    500 Internal Server Error

    The response body is always generic; `context` (operation, slug,
    original error type) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
