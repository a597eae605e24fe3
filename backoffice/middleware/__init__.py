"""
Middleware package.
"""
from .error_handler import add_exception_handlers
from .db_guard import require_database

__all__ = ["add_exception_handlers", "require_database"]
