"""
Error handling for FastAPI.

The JSON API answers structured errors; web pages get a redirect to the
login page, the setup page, or a bare 500.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.exceptions import RequestValidationError
import logging

from backoffice.exceptions import AppError, AuthenticationError, ConnectionUnavailableError
from backoffice.templating import render_page

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
SERVER_ERROR_BODY = "Server Error"


def is_api_request(request: Request) -> bool:
    path = request.url.path
    return path == API_PREFIX or path.startswith(API_PREFIX + "/")


def server_error() -> PlainTextResponse:
    """Generic 500 for web pages; the cause is only logged."""
    return PlainTextResponse(SERVER_ERROR_BODY, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def setup_required(request: Request):
    """503 page shown when no database is configured or reachable."""
    return render_page(
        request,
        "pages/setup_required.html",
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE
    )


def add_exception_handlers(app: FastAPI) -> None:
    """
    Add exception handlers to FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Handle custom AppError exceptions."""
        logger.error(
            f"{exc.__class__.__name__}: {exc.message}",
            extra={
                "status_code": exc.status_code,
                "details": exc.details,
                "path": request.url.path,
                "method": request.method
            }
        )

        if is_api_request(request):
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": exc.__class__.__name__,
                    "message": exc.message,
                    "details": exc.details
                }
            )

        if isinstance(exc, AuthenticationError):
            return RedirectResponse("/login", status_code=status.HTTP_302_FOUND)
        if isinstance(exc, ConnectionUnavailableError):
            return setup_required(request)
        return server_error()

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error: {exc.errors()}",
            extra={
                "path": request.url.path,
                "method": request.method
            }
        )

        if not is_api_request(request):
            return server_error()

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "details": jsonable_errors(exc)
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other unhandled exceptions."""
        logger.error(
            f"Unhandled exception: {str(exc)}",
            exc_info=True,
            extra={
                "path": request.url.path,
                "method": request.method
            }
        )

        if not is_api_request(request):
            return server_error()

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "InternalServerError",
                "message": "An unexpected error occurred",
                "details": {}
            }
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without values that JSON cannot encode."""
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in exc.errors()
    ]
