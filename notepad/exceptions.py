"""
Note Pad API: Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the three ways a note operation
       can fail.
Why:   Each failure carries its own HTTP status and error tag, so the global
       handlers in main.py can render a structured body without routes
       doing any try/except.
How:   Each exception carries a user-safe message and an optional context
       dict that is logged server-side but never returned to the client.
Who:   Raised by NoteService; caught by global handlers.

Exception Hierarchy:
    NotePadError (base)
    ├── ValidationError  → 400 Bad Request
    ├── NotFoundError    → 404 Not Found
    └── StorageError     → 500 Internal Server Error

A successful operation returns the Note; a failed one raises exactly one of
the three subclasses. The set is closed: nothing else leaves the service
layer except cancellation.
"""

from typing import Any, Dict, Optional


class NotePadError(Exception):
    """
    Base exception for all Note Pad application errors.

    Attributes:
        message:     User-facing error description (safe to return in API response)
        context:     Additional debug info (logged but NOT returned to client)
        status_code: HTTP status the global handler responds with
        error:       Machine-readable tag placed in the "error" field
    """

    status_code: int = 500
    error: str = "internal error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotePadError):
    """
    Raised when client input fails validation, before any storage call.

    When:    Empty or oversized title, null title/content, malformed body.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation error",
            "message": "title must not be empty",
            "details": {"field": "title"}
        }
    """

    status_code = 400
    error = "validation error"

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


class NotFoundError(NotePadError):
    """
    Raised when an id has no matching row.

    SQLAlchemy reports a missing row as None (or zero RETURNING rows); the
    service turns that into this exception.
    HTTP:    404 Not Found
    """

    status_code = 404
    error = "not found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(NotePadError):
    """
    Raised when the database fails: lost connection, timeout, constraint
    violation.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The context
        (operation, note id, driver exception type) is logged server-side
        only; raw engine text never reaches the API consumer.
    """

    status_code = 500
    error = "storage error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        operation: Optional[str] = None,
        note_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        if note_id:
            ctx["note_id"] = note_id
        super().__init__(message=message, context=ctx)
        self.operation = operation
        self.note_id = note_id
