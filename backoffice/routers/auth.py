"""
Operator sign-in.
Stores the operator's display name in the session so payments record who entered them.
"""
from typing import Optional

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError as PydanticValidationError
import logging

from backoffice.models import SessionUser
from backoffice.templating import render_page
from backoffice.utils.dependencies import SESSION_USER_KEY

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/login")
async def login_page(request: Request):
    return render_page(request, "pages/login.html", {"title": "Log in", "path": "/login"})


@router.post("/login")
async def login(request: Request, name: Optional[str] = Form(None)):
    """Sign in with a display name and go to the salaries page."""
    try:
        user = SessionUser(name=name or "")
    except PydanticValidationError:
        return render_page(
            request,
            "pages/login.html",
            {"title": "Log in", "path": "/login", "error": "Please enter your name."},
            status_code=status.HTTP_400_BAD_REQUEST
        )

    request.session[SESSION_USER_KEY] = user.model_dump()
    logger.info(f"Operator signed in: {user.name}")
    return RedirectResponse("/salaries", status_code=status.HTTP_302_FOUND)


@router.get("/logout")
@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return RedirectResponse("/login", status_code=status.HTTP_302_FOUND)
