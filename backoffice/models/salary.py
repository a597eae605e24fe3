"""
Salary models.
Salary payment records shared with the desktop POS (camelCase on the wire and in MongoDB).
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Any, Optional
from datetime import datetime, timezone
from enum import Enum


class SalaryType(str, Enum):
    """Kind of salary payment."""
    FULL = "full"
    ADVANCE = "advance"


def _blank_as_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _parse_datetime(v: Any) -> Any:
    """Accept ISO strings, including date-only and minute-precision form values."""
    v = _blank_as_none(v)
    if isinstance(v, str):
        try:
            return datetime.fromisoformat(v.strip())
        except ValueError:
            return v
    return v


def _as_naive_utc(v: Optional[datetime]) -> Optional[datetime]:
    # MongoDB hands back naive UTC datetimes, so store them that way too.
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


class SalaryCreate(BaseModel):
    """Salary creation request (web form or JSON)."""

    employee_name: str = Field(..., alias="employeeName", min_length=1)
    amount: float = Field(..., allow_inf_nan=False, description="Amount paid, no currency enforced")
    type: SalaryType = Field(default=SalaryType.FULL, validate_default=True)
    date: Optional[datetime] = Field(None, description="Payment date, defaults to now")
    notes: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "employeeName": "Alice",
                "amount": 500,
                "type": "advance",
                "date": "2024-05-01",
                "notes": "Mid-month advance"
            }
        }
    )

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes(cls, v: Any) -> Any:
        return _blank_as_none(v)

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v: Any) -> Any:
        """An omitted or blank type means a full payment."""
        v = _blank_as_none(v)
        return SalaryType.FULL if v is None else v

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return _parse_datetime(v)

    @field_validator("date")
    @classmethod
    def naive_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_naive_utc(v)


class SalaryRecord(BaseModel):
    """Stored salary payment record."""

    salary_id: str = Field(..., alias="salaryId", min_length=1)
    employee_name: str = Field(..., alias="employeeName", min_length=1)
    amount: float = Field(..., allow_inf_nan=False)
    type: SalaryType = Field(default=SalaryType.FULL, validate_default=True)
    date: datetime
    notes: Optional[str] = None
    recorded_by: Optional[str] = Field(None, alias="recordedBy")
    created_at: datetime = Field(default_factory=datetime.utcnow, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    @field_validator("date", "created_at")
    @classmethod
    def naive_datetimes(cls, v: datetime) -> datetime:
        return _as_naive_utc(v)

    def to_document(self) -> dict:
        """MongoDB document for this record."""
        return self.model_dump(by_alias=True)


class SalaryDeleteResponse(BaseModel):
    """Result of an API delete."""

    deleted: bool
    salary_id: str = Field(..., alias="salaryId")

    model_config = ConfigDict(populate_by_name=True)
