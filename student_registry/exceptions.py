"""
Student Registry — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the two failure modes of a request.
Why:   Lets StudentService signal "no such row" and "storage failed" without
       knowing about HTTP; global handlers in main.py pick the status code.
How:   Each exception carries a user-safe message and a context dict that is
       logged server-side but never returned to the client.

Exception Hierarchy:
    StudentRegistryError (base)
    ├── NotFoundError   → 404 Not Found
    └── DatabaseError   → 500 Internal Server Error ("Database error")
"""

from typing import Any, Dict, Optional


class StudentRegistryError(Exception):
    """
    Base exception for all application errors.

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


class NotFoundError(StudentRegistryError):
    """
    Raised when a lookup by id or name, an update, or a delete matches zero rows.

    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "Student",
        lookup: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if lookup:
            ctx["lookup"] = lookup
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(StudentRegistryError):
    """
    Raised when executing a statement fails for any reason.

    What:    Connectivity loss, pool exhaustion, constraint violation, or input
             rejected by storage.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always the generic
        "Database error". The operation name and original exception type are
        kept in context and logged server-side only.
    """

    def __init__(
        self,
        message: str = "Database error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
