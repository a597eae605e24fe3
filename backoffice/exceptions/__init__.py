"""
Custom exceptions package.
"""
from backoffice.exceptions.custom_exceptions import (
    AppError,
    ValidationError,
    AuthenticationError,
    NotFoundError,
    DuplicateError,
    DatabaseError,
    ConnectionUnavailableError,
    ConfigurationError,
    validation_error_from_pydantic
)

__all__ = [
    "AppError",
    "ValidationError",
    "AuthenticationError",
    "NotFoundError",
    "DuplicateError",
    "DatabaseError",
    "ConnectionUnavailableError",
    "ConfigurationError",
    "validation_error_from_pydantic"
]
