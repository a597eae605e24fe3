"""
JSON API.
Health check and salary endpoints for programmatic clients.
"""
from typing import List

from fastapi import APIRouter, Depends, status
import logging

from backoffice.database import Database
from backoffice.exceptions import NotFoundError
from backoffice.models import SalaryCreate, SalaryDeleteResponse, SalaryRecord, SessionUser
from backoffice.repositories import SalaryRepository
from backoffice.utils.dependencies import get_connection_manager, get_current_user, get_salary_repository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", summary="Service health")
async def health(database: Database = Depends(get_connection_manager)):
    return {
        "status": "ok",
        "database": database.state.value,
        "inMemory": database.in_memory,
    }


@router.get(
    "/salaries",
    response_model=List[SalaryRecord],
    summary="List salaries",
    description="All salary records, most recent payment date first"
)
async def list_salaries(repo: SalaryRepository = Depends(get_salary_repository)) -> List[SalaryRecord]:
    return await repo.list_all()


@router.post(
    "/salaries",
    response_model=SalaryRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Create salary"
)
async def create_salary(
    payload: SalaryCreate,
    user: SessionUser = Depends(get_current_user),
    repo: SalaryRepository = Depends(get_salary_repository)
) -> SalaryRecord:
    """
    Record a salary payment.

    - **employeeName**: Employee paid
    - **amount**: Amount paid
    - **type**: `full` (default) or `advance`
    - **date**: Payment date, defaults to now
    """
    return await repo.create(payload, acting_user=user)


@router.delete(
    "/salaries/{salary_id}",
    response_model=SalaryDeleteResponse,
    summary="Delete salary"
)
async def delete_salary(
    salary_id: str,
    repo: SalaryRepository = Depends(get_salary_repository)
) -> SalaryDeleteResponse:
    if not await repo.delete_by_id(salary_id):
        raise NotFoundError("Salary", salary_id)
    return SalaryDeleteResponse(deleted=True, salary_id=salary_id)
