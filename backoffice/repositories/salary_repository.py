"""
Salary repository.
Data access layer for salary payment records.
"""
from typing import Any, Callable, Dict, List, Optional, Union
from datetime import datetime
import threading
import time
import logging

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from .base_repository import BaseRepository
from backoffice.exceptions import (
    AuthenticationError,
    DatabaseError,
    DuplicateError,
    validation_error_from_pydantic
)
from backoffice.models import SalaryCreate, SalaryRecord, SessionUser

logger = logging.getLogger(__name__)


class SalaryIdGenerator:
    """
    Issues ``SAL<epoch milliseconds>`` identifiers.

    Within one process a stamp is never issued twice: when the clock has not
    moved past the last stamp, the next millisecond is used instead.
    """

    prefix = "SAL"

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            stamp = int(self._clock() * 1000)
            if stamp <= self._last:
                stamp = self._last + 1
            self._last = stamp
        return f"{self.prefix}{stamp}"


salary_ids = SalaryIdGenerator()


class SalaryRepository(BaseRepository):
    """Repository for salary records, keyed by ``salaryId``."""

    def __init__(self, collection, id_generator: Callable[[], str] = salary_ids):
        super().__init__(collection)
        self.id_generator = id_generator

    async def list_all(self) -> List[SalaryRecord]:
        """
        All salary records, most recent payment date first.

        Returns:
            List of salary records (no pagination)
        """
        try:
            documents = await self.find_all(sort=[("date", -1)])
        except PyMongoError as e:
            raise DatabaseError("Could not list salaries", details={"reason": str(e)}) from e

        salaries = []
        for doc in documents:
            try:
                salaries.append(SalaryRecord.model_validate(doc))
            except PydanticValidationError as e:
                # Records written by other clients may not fit the model.
                logger.warning(
                    f"Skipping unreadable salary {doc.get('salaryId')}: {e.error_count()} errors",
                    extra={"salary_id": doc.get("salaryId")}
                )
        return salaries

    async def find_by_salary_id(self, salary_id: str) -> Optional[SalaryRecord]:
        document = await self.find_one({"salaryId": salary_id})
        return SalaryRecord.model_validate(document) if document else None

    async def create(
        self,
        data: Union[SalaryCreate, Dict[str, Any]],
        acting_user: Optional[SessionUser]
    ) -> SalaryRecord:
        """
        Create a salary record on behalf of the acting user.

        Args:
            data: Validated request or raw form values
            acting_user: Signed-in operator, stored as ``recordedBy``

        Returns:
            The stored record

        Raises:
            AuthenticationError: If no acting user is given
            ValidationError: If required fields are missing or type is invalid
            DuplicateError: If the generated salaryId already exists
        """
        if acting_user is None:
            raise AuthenticationError("A signed-in user is required to record a salary")

        try:
            request = data if isinstance(data, SalaryCreate) else SalaryCreate.model_validate(data)
            now = datetime.utcnow()
            record = SalaryRecord(
                salary_id=self.id_generator(),
                employee_name=request.employee_name,
                amount=request.amount,
                type=request.type,
                date=request.date or now,
                notes=request.notes,
                recorded_by=acting_user.name,
                created_at=now
            )
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e) from e

        logger.info(f"Creating salary {record.salary_id} for {record.employee_name}")

        if await self.exists({"salaryId": record.salary_id}):
            raise DuplicateError("Salary", "salaryId", record.salary_id)

        try:
            await self.insert(record.to_document())
        except DuplicateKeyError as e:
            raise DuplicateError("Salary", "salaryId", record.salary_id) from e
        except PyMongoError as e:
            raise DatabaseError("Could not save salary", details={"reason": str(e)}) from e

        return record

    async def delete_by_id(self, salary_id: str) -> bool:
        """
        Delete the salary with this salaryId.

        A missing record is not an error.

        Args:
            salary_id: Business identifier (e.g. SAL1714557600000)

        Returns:
            True if a record was removed, False if none matched
        """
        try:
            deleted = await self.delete_one({"salaryId": salary_id})
        except PyMongoError as e:
            raise DatabaseError("Could not delete salary", details={"reason": str(e)}) from e

        if not deleted:
            logger.info(f"Salary {salary_id} not found, nothing deleted")
        return deleted
