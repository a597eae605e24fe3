"""
Back office FastAPI application.
Builds the app, owns the database connection and mounts the /api and web routes.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from backoffice.config import Settings, get_settings
from backoffice.database import Database
from backoffice.middleware import add_exception_handlers, require_database
from backoffice.routers import api_router, web_router

logger = logging.getLogger(__name__)


def log_connect_failure(task: asyncio.Future) -> None:
    """Report a startup connection attempt that raised instead of failing cleanly."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Database connection attempt crashed: {exc}", exc_info=exc)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None
) -> FastAPI:
    """
    Build the back office application.

    Args:
        settings: Settings to use (defaults to the environment)
        database: Connection manager to use (defaults to one built from settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    database = database or Database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Start connecting without holding up startup.
        app.state.connect_task = asyncio.ensure_future(database.connect())
        app.state.connect_task.add_done_callback(log_connect_failure)
        yield
        await database.close()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    # Registration order: the last added middleware is the outermost.
    app.middleware("http")(require_database)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET,
        max_age=settings.SESSION_MAX_AGE
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    add_exception_handlers(app)

    app.include_router(api_router, prefix="/api")
    app.include_router(web_router)

    logger.info(f"{settings.APP_NAME} application created")
    return app


app = create_app()
