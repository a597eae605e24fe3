"""
Utilities package.
Provides logging setup and request dependencies.
"""
from .logger import setup_logging, JSONFormatter, TextFormatter
from .dependencies import (
    SESSION_USER_KEY,
    get_connection_manager,
    get_database,
    get_salary_repository,
    get_optional_user,
    get_current_user
)

__all__ = [
    "setup_logging",
    "JSONFormatter",
    "TextFormatter",
    "SESSION_USER_KEY",
    "get_connection_manager",
    "get_database",
    "get_salary_repository",
    "get_optional_user",
    "get_current_user",
]
