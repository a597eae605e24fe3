"""
Server-side page rendering.
Every page gets the business name, current path, session user and database status.
"""
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render_page(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200
):
    """
    Render a template with the global view variables.

    Args:
        request: Current request
        name: Template path under templates/
        context: Page specific variables (override the globals)
        status_code: HTTP status of the response
    """
    settings = request.app.state.settings
    database = request.app.state.database
    session = request.session if "session" in request.scope else {}

    page = {
        "business_name": settings.BUSINESS_NAME,
        "current_path": request.url.path,
        "user": session.get("user"),
        "db_missing": settings.SERVERLESS and not database.is_connected,
    }
    page.update(context or {})
    return templates.TemplateResponse(request, name, page, status_code=status_code)
