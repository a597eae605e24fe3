"""
Database guard for serverless deployments.

A serverless instance without a working database answers every request with
the "Setup Required" page instead of running route handlers.
"""
import asyncio
import logging

from fastapi import Request

from backoffice.database import ConnectionState, Database
from backoffice.middleware.error_handler import setup_required

logger = logging.getLogger(__name__)


async def require_database(request: Request, call_next):
    """HTTP middleware: wait briefly for the connection, else answer 503."""
    database: Database = request.app.state.database

    if not database.settings.SERVERLESS or database.is_connected:
        return await call_next(request)

    if database.state in (ConnectionState.UNSET, ConnectionState.CONNECTING):
        try:
            await asyncio.wait_for(database.connect(), timeout=database.settings.DB_GUARD_WAIT_SECONDS)
        except asyncio.TimeoutError:
            logger.warning("Timed out waiting for the database connection")

    if database.is_connected:
        return await call_next(request)

    logger.warning(f"No database connection, refusing {request.method} {request.url.path}")
    return setup_required(request)
