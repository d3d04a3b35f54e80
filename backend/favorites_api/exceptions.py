"""
Favorites API Backend: Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the failure cases the API knows about.
Why:   Services raise typed errors; global handlers registered in main.py turn
       them into the JSON bodies clients expect, so no route needs its own
       try/except.
How:   Each exception carries a client-safe message and an optional context
       dict that is logged but never returned.

Exception Hierarchy:
    FavoritesError (base)
    ├── ValidationError   → 400 Bad Request   {"error": <message>}
    ├── DatabaseError     → 500 Server Error  {"error": "Something went wrong"}
    └── MigrationError    → startup only (process aborts outside production)
"""

from typing import Any, Dict, Optional


class FavoritesError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Client-facing description (safe to return in API response)
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


class ValidationError(FavoritesError):
    """
    Raised when client input fails validation.

    When:    Missing required create fields, non-integer recipe id, malformed body.
    HTTP:    400 Bad Request

    Not a system fault: handlers log it at WARNING only.
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


class DatabaseError(FavoritesError):
    """
    Raised when a database operation fails.

    HTTP:    500 Internal Server Error

    The response body is always the generic "Something went wrong"; the
    operation name and driver error type live in `context` for the logs.
    """

    def __init__(
        self,
        message: str = "Something went wrong",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MigrationError(FavoritesError):
    """
    Raised by the bootstrap when schema preparation failed outside production.

    `original` is the error from the primary migration attempt, not the
    fallback's, because that is the one worth fixing.
    """

    def __init__(
        self,
        message: str = "Database migration failed",
        original: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if original is not None:
            ctx["original_error"] = f"{type(original).__name__}: {original}"
        super().__init__(message=message, context=ctx)
        self.original = original
