"""
Repository package.
Provides data access layer for all entities.
"""
from .base_repository import BaseRepository
from .salary_repository import SalaryRepository, SalaryIdGenerator, salary_ids

__all__ = [
    "BaseRepository",
    "SalaryRepository",
    "SalaryIdGenerator",
    "salary_ids",
]
