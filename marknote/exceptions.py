"""
MarkNote — Custom Exception Hierarchy
======================================

What:  Application-specific exceptions for the error scenarios the app models.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) render an HTML
       error page with the matching status code; the create/update handlers
       catch ValidationError themselves to re-render the form.
Who:   Raised by services; caught by routes and global handlers.

Exception Hierarchy:
    MarkNoteError (base)
    ├── ValidationError   → 422 Unprocessable Entity (form re-rendered with errors)
    ├── NotFoundError     → 404 Not Found
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class MarkNoteError(Exception):
    """
    Base exception for all MarkNote application errors.

    Attributes:
        message:  User-facing error description (safe to render)
        context:  Additional debug info (logged but NOT rendered)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MarkNoteError):
    """
    Raised when submitted note fields break a business rule.

    What:    Blank title, title over 200 characters, or blank content.
    HTTP:    422 Unprocessable Entity

    `errors` maps each failing field to its messages, in the order the form
    displays them:

        {"title": ["Title can't be blank"], "content": ["Content can't be blank"]}
    """

    def __init__(
        self,
        errors: Optional[Dict[str, List[str]]] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.errors = errors or {}
        if message is None:
            count = len(self.full_messages)
            noun = "error" if count == 1 else "errors"
            message = f"{count} {noun} prohibited this note from being saved"
        ctx = context or {}
        if self.errors:
            ctx["fields"] = sorted(self.errors)
        super().__init__(message=message, context=ctx)

    @property
    def full_messages(self) -> List[str]:
        return [msg for field_msgs in self.errors.values() for msg in field_msgs]


class NotFoundError(MarkNoteError):
    """
    Raised when a requested note does not exist.

    What:    Unknown (or malformed) id on show/edit/update/destroy.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service layer converts that
    into this exception so routes never check for None.
    """

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


class DatabaseError(MarkNoteError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The rendered page is always generic; the original error type and the
    affected note id go to the server log through `context`.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
