"""
Custom exceptions for the back office.
Each error carries the HTTP status the API surface answers with.
"""
from typing import Optional, Any, Dict


class AppError(Exception):
    """
    Base for every error the back office reports.

    Carries the HTTP status and a details dict; the exception handlers turn it
    into JSON on /api and into a redirect or bare page elsewhere.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """A salary form or payload failed model validation (400)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class AuthenticationError(AppError):
    """No operator is signed in for an action that records their name (401)."""

    def __init__(self, message: str = "Login required", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=401, details=details)


class NotFoundError(AppError):
    """API delete of a salaryId that is not stored (404)."""

    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} not found"
        if identifier:
            message += f": {identifier}"
        super().__init__(message, status_code=404, details={"resource": resource, "identifier": identifier})


class DuplicateError(AppError):
    """A generated salaryId is already taken (409)."""

    def __init__(self, resource: str, field: str, value: Any):
        message = f"{resource} with {field}='{value}' already exists"
        super().__init__(
            message,
            status_code=409,
            details={"resource": resource, "field": field, "value": value}
        )


class DatabaseError(AppError):
    """MongoDB rejected a read or write on the salaries collection (500)."""

    def __init__(self, message: str = "Database operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)


class ConnectionUnavailableError(AppError):
    """No database reachable for this request (503)."""

    def __init__(self, message: str = "Database connection unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=503, details=details)


class ConfigurationError(AppError):
    """Startup cannot proceed, e.g. no free port left to bind (500)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)


def validation_error_from_pydantic(exc, message: str = "Invalid salary record") -> ValidationError:
    """
    Convert a pydantic ValidationError into the application's ValidationError.

    Args:
        exc: pydantic.ValidationError raised while building a model
        message: Human readable summary

    Returns:
        ValidationError listing the offending fields
    """
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    fields = [".".join(str(part) for part in error["loc"]) for error in errors]
    return ValidationError(
        f"{message}: {', '.join(fields)}" if fields else message,
        details={"errors": errors}
    )
