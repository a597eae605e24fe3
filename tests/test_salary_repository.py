"""
Test the salary repository against an in-memory MongoDB.
"""
from datetime import datetime, timedelta, timezone

import pytest

from backoffice.database import Collections
from backoffice.exceptions import AuthenticationError, DuplicateError, ValidationError
from backoffice.models import SalaryCreate
from backoffice.repositories import SalaryIdGenerator, SalaryRepository


def ms_floor(value: datetime) -> datetime:
    """MongoDB keeps datetimes to the millisecond."""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


class TestCreate:
    """Creating salary records."""

    @pytest.mark.asyncio
    async def test_assigns_sal_timestamp_id(self, salary_repo, manager):
        before = int(datetime.now(timezone.utc).timestamp() * 1000)
        record = await salary_repo.create({"employeeName": "Alice", "amount": 500}, manager)

        assert record.salary_id.startswith("SAL")
        assert record.salary_id[3:].isdigit()
        assert int(record.salary_id[3:]) >= before

    @pytest.mark.asyncio
    async def test_alice_advance_scenario(self, salary_repo, manager):
        record = await salary_repo.create(
            {"employeeName": "Alice", "amount": 500, "type": "advance"}, manager
        )

        salaries = await salary_repo.list_all()
        assert len(salaries) == 1
        assert salaries[0].salary_id == record.salary_id
        assert salaries[0].type == "advance"
        assert salaries[0].amount == 500
        assert salaries[0].employee_name == "Alice"

        await salary_repo.delete_by_id(record.salary_id)
        assert await salary_repo.list_all() == []

    @pytest.mark.asyncio
    async def test_defaults(self, salary_repo, manager):
        before = datetime.utcnow()
        record = await salary_repo.create({"employeeName": "Bob", "amount": "120.50"}, manager)

        assert record.type == "full"
        assert record.amount == 120.5
        assert record.notes is None
        assert record.date >= before
        assert record.created_at >= before

        stored = await salary_repo.find_by_salary_id(record.salary_id)
        assert stored.date >= ms_floor(before)
        assert stored.recorded_by == "Manager"

    @pytest.mark.asyncio
    async def test_blank_form_values_count_as_omitted(self, salary_repo, manager):
        record = await salary_repo.create(
            {"employeeName": "Bob", "amount": "10", "type": "", "date": "", "notes": ""}, manager
        )

        assert record.type == "full"
        assert record.notes is None
        assert record.date is not None

    @pytest.mark.asyncio
    async def test_date_only_string(self, salary_repo, manager):
        record = await salary_repo.create(
            {"employeeName": "Carla", "amount": 80, "date": "2024-05-01"}, manager
        )
        assert record.date == datetime(2024, 5, 1)

    @pytest.mark.asyncio
    async def test_aware_date_stored_as_utc(self, salary_repo, manager):
        paid = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        record = await salary_repo.create(
            SalaryCreate(employee_name="Dan", amount=10, date=paid), manager
        )
        assert record.date == datetime(2024, 5, 1, 10, 0)

    @pytest.mark.asyncio
    async def test_invalid_type_rejected(self, salary_repo, manager):
        with pytest.raises(ValidationError) as exc_info:
            await salary_repo.create({"employeeName": "Eve", "amount": 10, "type": "bonus"}, manager)

        assert "type" in exc_info.value.message
        assert await salary_repo.count() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", [
        {"amount": 10},
        {"employeeName": "Eve"},
        {"employeeName": "   ", "amount": 10},
        {"employeeName": "Eve", "amount": "ten"},
        {"employeeName": "Eve", "amount": "nan"},
        {"employeeName": "Eve", "amount": "inf"},
        {"employeeName": "Eve", "amount": "1e999"},
        {"employeeName": "Eve", "amount": float("nan")},
    ])
    async def test_missing_or_invalid_fields_rejected(self, salary_repo, manager, data):
        with pytest.raises(ValidationError):
            await salary_repo.create(data, manager)
        assert await salary_repo.count() == 0

    @pytest.mark.asyncio
    async def test_requires_acting_user(self, salary_repo):
        with pytest.raises(AuthenticationError):
            await salary_repo.create({"employeeName": "Eve", "amount": 10}, None)
        assert await salary_repo.count() == 0

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, database, manager):
        repo = SalaryRepository(database.get_db()[Collections.SALARIES], id_generator=lambda: "SAL1")
        await repo.create({"employeeName": "Fay", "amount": 1}, manager)

        with pytest.raises(DuplicateError) as exc_info:
            await repo.create({"employeeName": "Gus", "amount": 2}, manager)

        assert exc_info.value.status_code == 409
        assert await repo.count() == 1


class TestListAndDelete:
    """Listing and deleting salary records."""

    @pytest.mark.asyncio
    async def test_lists_all_by_date_descending(self, salary_repo, manager):
        for day in (3, 1, 5, 2, 4):
            await salary_repo.create(
                {"employeeName": f"Day {day}", "amount": day, "date": f"2024-01-0{day}"}, manager
            )

        salaries = await salary_repo.list_all()

        assert len(salaries) == 5
        assert [s.date.day for s in salaries] == [5, 4, 3, 2, 1]
        assert len({s.salary_id for s in salaries}) == 5

    @pytest.mark.asyncio
    async def test_list_skips_unreadable_documents(self, database, salary_repo, manager):
        record = await salary_repo.create({"employeeName": "Alice", "amount": 500}, manager)
        await database.get_db()[Collections.SALARIES].insert_one(
            {"salaryId": "SALX", "employeeName": "Pos", "amount": 1, "date": None}
        )

        salaries = await salary_repo.list_all()

        assert [s.salary_id for s in salaries] == [record.salary_id]
        assert await salary_repo.count() == 2

    @pytest.mark.asyncio
    async def test_delete_unknown_is_noop(self, salary_repo, manager):
        await salary_repo.create({"employeeName": "Hal", "amount": 1}, manager)

        assert await salary_repo.delete_by_id("SAL0") is False
        assert await salary_repo.count() == 1

    @pytest.mark.asyncio
    async def test_delete_removes_exactly_one(self, salary_repo, manager):
        first = await salary_repo.create({"employeeName": "Ida", "amount": 1}, manager)
        second = await salary_repo.create({"employeeName": "Jon", "amount": 2}, manager)
        third = await salary_repo.create({"employeeName": "Kim", "amount": 3}, manager)

        assert await salary_repo.delete_by_id(second.salary_id) is True

        remaining = {s.salary_id for s in await salary_repo.list_all()}
        assert remaining == {first.salary_id, third.salary_id}

    @pytest.mark.asyncio
    async def test_ids_are_stable(self, salary_repo, manager):
        keep = await salary_repo.create({"employeeName": "Lea", "amount": 1}, manager)
        drop = await salary_repo.create({"employeeName": "Max", "amount": 2}, manager)

        await salary_repo.delete_by_id(drop.salary_id)
        await salary_repo.delete_by_id("SAL-missing")

        stored = await salary_repo.find_by_salary_id(keep.salary_id)
        assert stored is not None
        assert stored.employee_name == "Lea"


class TestSalaryIdGenerator:
    """Identifier generation."""

    def test_uses_epoch_milliseconds(self):
        generate = SalaryIdGenerator(clock=lambda: 1714557600.5)
        assert generate() == "SAL1714557600500"

    def test_never_repeats_on_same_millisecond(self):
        generate = SalaryIdGenerator(clock=lambda: 1.0)
        assert [generate(), generate(), generate()] == ["SAL1000", "SAL1001", "SAL1002"]

    def test_clock_going_backwards(self):
        ticks = iter([2.0, 1.0])
        generate = SalaryIdGenerator(clock=lambda: next(ticks))
        assert generate() == "SAL2000"
        assert generate() == "SAL2001"
