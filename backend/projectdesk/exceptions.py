"""
Projectdesk Backend — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the project workflow and its resolvers.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       structured JSON error responses with the matching HTTP status code.
Who:   Raised by the unit of work, repositories and services.

Exception Hierarchy:
    ProjectdeskError (base)
    ├── ValidationError      → 400 Bad Request (missing/malformed input)
    ├── DependencyError      → 422 Unprocessable Entity (upstream entity unresolved)
    ├── ConflictError        → 409 Conflict (uniqueness violation)
    │   └── TransactionError → 409 Conflict (nested begin, write outside a transaction)
    ├── NotFoundError        → 404 Not Found
    └── DatabaseError        → 500 Internal Server Error

Propagation:
    Services never swallow these. A catch site rolls back the transaction it
    owns and re-raises the original exception unchanged.
"""

from typing import Any, Dict, Optional


class ProjectdeskError(Exception):
    """
    Base exception for all Projectdesk application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for client errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ProjectdeskError):
    """
    Raised when caller input fails a business rule.

    When:    Empty names, missing descriptors, negative prices, missing dates.
    HTTP:    400 Bad Request

    Always raised before any storage access or transaction is opened, so a
    validation failure is never partially applied.
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


class DependencyError(ProjectdeskError):
    """
    Raised when a required upstream entity could not be resolved.

    When:    Role resolution for a staff member yields no usable key, or a
             project references a status/customer id that does not exist.
    HTTP:    422 Unprocessable Entity
    """

    def __init__(
        self,
        message: str = "A required related entity could not be resolved",
        dependency: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if dependency:
            ctx["dependency"] = dependency
        super().__init__(message=message, context=ctx)
        self.dependency = dependency


class ConflictError(ProjectdeskError):
    """
    Raised on uniqueness violations.

    When:    Creating a project whose project number already exists, or any
             other integrity constraint rejected by the database.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The request conflicts with existing data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TransactionError(ConflictError):
    """
    Raised when the unit of work is driven out of order.

    When:    begin() while a transaction is already active (no nesting), or a
             repository write attempted with no active transaction.
    """

    def __init__(
        self,
        message: str = "Transaction is already in progress",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ProjectdeskError):
    """
    Raised when a referenced resource does not exist.

    When:    Updating a project by a number that is not stored, looking up a
             role by name without creating it.
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


class DatabaseError(ProjectdeskError):
    """
    Raised when a read path fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The underlying
    driver error is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
