"""
FastAPI dependencies for dependency injection.
Provides the database, repositories and the session user to route handlers.
"""
from typing import Optional

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError as PydanticValidationError
import logging

from backoffice.database import Collections, Database
from backoffice.exceptions import AuthenticationError, ConnectionUnavailableError
from backoffice.models import SessionUser
from backoffice.repositories import SalaryRepository

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"


def get_connection_manager(request: Request) -> Database:
    return request.app.state.database


async def get_database(
    database: Database = Depends(get_connection_manager)
) -> AsyncIOMotorDatabase:
    """
    Dependency returning the connected MongoDB database.

    Raises:
        ConnectionUnavailableError: If no database could be reached
    """
    db = await database.connect()
    if db is None:
        raise ConnectionUnavailableError()
    return db


async def get_salary_repository(
    db: AsyncIOMotorDatabase = Depends(get_database)
) -> SalaryRepository:
    """Salary repository bound to the salaries collection."""
    return SalaryRepository(db[Collections.SALARIES])


def get_optional_user(request: Request) -> Optional[SessionUser]:
    """
    Session user if one is signed in, None otherwise.

    Usage:
        @router.get("/page")
        async def page(user: Optional[SessionUser] = Depends(get_optional_user)):
            ...
    """
    raw = request.session.get(SESSION_USER_KEY)
    if not raw:
        return None
    try:
        return SessionUser.model_validate(raw)
    except PydanticValidationError:
        logger.warning("Discarding malformed session user")
        request.session.pop(SESSION_USER_KEY, None)
        return None


def get_current_user(
    user: Optional[SessionUser] = Depends(get_optional_user)
) -> SessionUser:
    """
    Dependency requiring a signed-in session user.

    Raises:
        AuthenticationError: If nobody is signed in
    """
    if user is None:
        raise AuthenticationError()
    return user
