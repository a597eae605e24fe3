"""
Salaries pages.
List, add and delete salary payments; every change redirects back to the list.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
import logging

from backoffice.middleware.error_handler import server_error
from backoffice.models import SessionUser
from backoffice.repositories import SalaryRepository
from backoffice.templating import render_page
from backoffice.utils.dependencies import get_current_user, get_optional_user, get_salary_repository

logger = logging.getLogger(__name__)
router = APIRouter()

SALARIES_PATH = "/salaries"


def back_to_list() -> RedirectResponse:
    return RedirectResponse(SALARIES_PATH, status_code=status.HTTP_302_FOUND)


@router.get("/")
async def index():
    return back_to_list()


@router.get(SALARIES_PATH)
async def get_salaries(
    request: Request,
    user: Optional[SessionUser] = Depends(get_optional_user),
    repo: SalaryRepository = Depends(get_salary_repository)
):
    """Salary list page, most recent first."""
    try:
        salaries = await repo.list_all()
    except Exception as e:
        logger.error(f"Error listing salaries: {e}", exc_info=True)
        return server_error()

    return render_page(request, "pages/salaries.html", {
        "title": "Salaries",
        "salaries": salaries,
        "user": user,
        "path": SALARIES_PATH,
    })


@router.post(SALARIES_PATH)
async def add_salary(
    employee_name: Optional[str] = Form(None, alias="employeeName"),
    amount: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    user: SessionUser = Depends(get_current_user),
    repo: SalaryRepository = Depends(get_salary_repository)
):
    """Record a salary payment for the signed-in operator."""
    form = {
        "employeeName": employee_name,
        "amount": amount,
        "type": type,
        "date": date,
        "notes": notes,
    }
    try:
        record = await repo.create(form, acting_user=user)
    except Exception as e:
        logger.error(f"Error adding salary: {e}", exc_info=True)
        return server_error()

    logger.info(f"Salary {record.salary_id} recorded by {user.name}")
    return back_to_list()


@router.post(SALARIES_PATH + "/{salary_id}/delete")
async def delete_salary(
    salary_id: str,
    repo: SalaryRepository = Depends(get_salary_repository)
):
    """Delete a salary; an unknown id still redirects to the list."""
    try:
        await repo.delete_by_id(salary_id)
    except Exception as e:
        logger.error(f"Error deleting salary {salary_id}: {e}", exc_info=True)
        return server_error()

    return back_to_list()
