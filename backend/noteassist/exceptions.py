"""
NoteAssist Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages, without leaking internals.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error envelopes with the matching HTTP status code.
Who:   Raised by services and the auth dependency; caught by global handlers.

Exception Hierarchy:
    NoteAssistError (base)
    ├── UnauthorizedError   → 401 Unauthorized (no credential supplied)
    ├── ForbiddenError      → 403 Forbidden (credential supplied but invalid)
    ├── ValidationError     → 400 Bad Request (client can fix)
    ├── NotFoundError       → 404 Not Found (absent OR owned by someone else)
    ├── UpstreamError       → 500 Internal Server Error (AI provider failed)
    └── DatabaseError       → 500 Internal Server Error (store failed)
"""

from typing import Any, Dict, Optional


class NoteAssistError(Exception):
    """
    Base exception for all NoteAssist application errors.

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


class UnauthorizedError(NoteAssistError):
    """
    Raised when a protected route is called without a bearer credential.

    HTTP: 401 Unauthorized. No verification is attempted.
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(NoteAssistError):
    """
    Raised when a bearer credential is present but fails verification.

    What:    Expired, wrong audience, malformed, revoked, or otherwise unusable.
    HTTP:    403 Forbidden

    The reason is kept in context for the server log only; the client always
    sees the same message so token probing learns nothing.
    """

    def __init__(
        self,
        message: str = "Invalid token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(NoteAssistError):
    """
    Raised when client input fails validation.

    When:    Missing assist text, malformed JSON body, wrong field types.
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


class NotFoundError(NoteAssistError):
    """
    Raised when a requested resource does not exist for the caller.

    When:    No note matches both the id and the caller's user id.
    HTTP:    404 Not Found

    A note owned by another user raises exactly the same error as a note
    that was never created, so existence never leaks across users.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class UpstreamError(NoteAssistError):
    """
    Raised when the generative-text provider fails.

    What:    SDK or HTTP error, timeout, blocked prompt, or a response without
             a usable text result.
    HTTP:    500 Internal Server Error
    Retry:   Never retried automatically; the client decides.
    """

    def __init__(
        self,
        message: str = "The AI service failed to process the request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(NoteAssistError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the underlying
    error is only logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
