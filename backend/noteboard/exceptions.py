"""
NoteBoard — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the failure kinds of the two stores.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       structured JSON error responses with the matching HTTP status code.
Who:   Raised by the NoteBoard after it matches a store Failure, and by
       routes for input that never reaches the board.

Exception Hierarchy:
    NoteBoardError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── StorageError             → 502 Bad Gateway
    └── TransientNetworkError    → 503 Service Unavailable

Stores never raise these: they return `Failure(kind, message)` results
(see services/store_base.py) and the NoteBoard converts a failure into the
exception of the same kind with `error_for_failure()`.
"""

from typing import Any, Dict, Optional


class NoteBoardError(Exception):
    """
    Base exception for all NoteBoard application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned as `details`)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NoteBoardError):
    """
    Raised when input fails validation.

    When:    Missing name/description rejected by the Record Store, unknown form
             field, upload over the size limit, unusable blob key.
    HTTP:    400 Bad Request
    """

    status_code = 400

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


class NotFoundError(NoteBoardError):
    """
    Raised when a referenced record or blob key does not exist.

    When:    Record Store delete of an unknown id, Blob Store get of an
             unknown key, signed URL for a missing object.
    HTTP:    404 Not Found
    """

    status_code = 404

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


class StorageError(NoteBoardError):
    """
    Raised when a blob upload or read fails in transport.

    When:    Disk full, permission denied, storage gateway rejected the object.
    HTTP:    502 Bad Gateway
    """

    status_code = 502

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TransientNetworkError(NoteBoardError):
    """
    Raised for any other remote call failure.

    When:    Connection refused, timeout, 5xx from the managed API, database
             driver errors in the local record store.
    HTTP:    503 Service Unavailable
    """

    status_code = 503

    def __init__(
        self,
        message: str = "A remote service is temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
