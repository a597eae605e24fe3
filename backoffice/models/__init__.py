"""
Models package.
Pydantic schemas for all entities.
"""
from .salary import (
    SalaryType,
    SalaryCreate,
    SalaryRecord,
    SalaryDeleteResponse
)
from .user import SessionUser

__all__ = [
    "SalaryType",
    "SalaryCreate",
    "SalaryRecord",
    "SalaryDeleteResponse",
    "SessionUser",
]
