"""
Vetlyst Backend — Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and middleware; caught by global handlers.

Exception Hierarchy:
    VetlystError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── PersistenceError         → 500 Internal Server Error
    ├── NotificationError        → never surfaced (logged by NotificationService)
    ├── ImportFileError          → CLI exit code 1 (never raised by HTTP routes)
    └── RateLimitExceededError   → 429 Too Many Requests

Propagation policy:
    Validation and persistence errors abort the operation and reach the
    caller. Notification errors are caught after the row is durable and only
    logged. Nothing is retried automatically; the user resubmits the form.
"""

from typing import Any, Dict, List, Optional


class VetlystError(Exception):
    """
    Base exception for all Vetlyst application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, and returned only for 400s)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(VetlystError):
    """
    Raised when a submitted form is missing required input.

    HTTP:    400 Bad Request

    Only presence is checked (non-empty after stripping whitespace).
    Email and phone syntax are not validated.

    Example response:
        {
            "error": "validation_error",
            "message": "Missing required fields: petOwnerPhone",
            "details": {"fields": ["petOwnerPhone"]}
        }
    """

    def __init__(
        self,
        message: str = "Missing required fields",
        fields: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = list(fields)
        super().__init__(message=message, context=ctx)
        self.fields = list(fields or [])


class NotFoundError(VetlystError):
    """
    Raised when a requested resource does not exist.

    When:    A clinic slug whose short id is not a prefix of any place id.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
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


class PersistenceError(VetlystError):
    """
    Raised when the store is unreachable or rejects a read or write.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The driver
        error is logged server-side and kept in `context` only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotificationError(VetlystError):
    """
    Raised when an email could not be dispatched.

    Never reaches an HTTP handler: the submission row is already committed
    and is the source of truth, so NotificationService logs this and moves on.
    """

    def __init__(
        self,
        message: str = "Email notification could not be sent",
        recipient: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if recipient:
            ctx["recipient"] = recipient
        super().__init__(message=message, context=ctx)
        self.recipient = recipient


class ImportFileError(VetlystError):
    """
    Raised when an import CSV cannot be read or lacks a required column.

    Surfaces only through the `vetlyst` CLI, which logs it and exits 1.
    Bad individual rows are skipped and counted instead.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message=message, context=ctx)
        self.path = path


class RateLimitExceededError(VetlystError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests (with Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
