from datetime import datetime, timedelta, timezone

import pytest

from src.errors import AuthorizationError, UpstreamError, ValidationError
from src.shifts.availability import get_available_employees, shifts_overlap
from src.storage.sql import SqlRecordStore

from tests.conftest import RecordingStore


def at(hour, minute=0):
    return datetime(2024, 1, 10, hour, minute)


async def add_shift(store, employee_id, start, end, **extra):
    await store.insert("shifts", [{"employee_id": employee_id, "start_time": start, "end_time": end, **extra}])


def ids(result):
    return [employee.id for employee in result.value]


@pytest.mark.parametrize("a,b,expected", [
    ((9, 13), (13, 15), False),
    ((13, 15), (9, 13), False),
    ((9, 13), (12, 14), True),
    ((8, 18), (10, 11), True),
    ((10, 11), (8, 18), True),
    ((7, 9), (9, 13), False),
])
def test_shifts_overlap_is_strict(a, b, expected):
    assert shifts_overlap(at(a[0]), at(a[1]), at(b[0]), at(b[1])) is expected


async def test_shift_ending_at_window_start_does_not_block(store, seed_users, admin_ctx):
    await add_shift(store, "e1", at(9), at(13))

    result = await get_available_employees(admin_ctx, store, at(13), at(15))

    assert result.ok
    assert ids(result) == ["e1", "e2"]
    assert result.message == "2 employees available for assignment"


async def test_overlapping_shift_blocks_employee(store, seed_users, admin_ctx):
    await add_shift(store, "e1", at(9), at(13))

    result = await get_available_employees(admin_ctx, store, at(12), at(14))

    assert ids(result) == ["e2"]
    assert result.message == "1 employees available for assignment"


async def test_shift_starting_at_window_end_does_not_block(store, seed_users, admin_ctx):
    await add_shift(store, "e2", at(15), at(17))

    result = await get_available_employees(admin_ctx, store, at(13), at(15))

    assert ids(result) == ["e1", "e2"]


async def test_shift_covering_window_blocks(store, seed_users, admin_ctx):
    await add_shift(store, "e1", at(8), at(18))

    result = await get_available_employees(admin_ctx, store, at(10), at(11))

    assert ids(result) == ["e2"]


async def test_admins_are_not_candidates(store, seed_users, admin_ctx):
    result = await get_available_employees(admin_ctx, store, at(10), at(11))

    assert "admin-1" not in ids(result)


async def test_aware_window_is_compared_in_utc(store, seed_users, admin_ctx):
    await add_shift(store, "e1", at(9), at(13))
    kyiv = timezone(timedelta(hours=2))

    result = await get_available_employees(
        admin_ctx, store,
        datetime(2024, 1, 10, 14, 0, tzinfo=kyiv),
        datetime(2024, 1, 10, 16, 0, tzinfo=kyiv),
    )

    assert ids(result) == ["e2"]


async def test_no_employees(session_maker, admin_ctx):
    store = SqlRecordStore(session_maker)

    result = await get_available_employees(admin_ctx, store, at(10), at(11))

    assert result.ok
    assert result.value == []
    assert result.message == "0 employees available for assignment"


async def test_non_admin_is_rejected_before_any_read(store, employee_ctx):
    recording = RecordingStore(store)

    result = await get_available_employees(employee_ctx, recording, at(10), at(11))

    assert not result.ok
    assert isinstance(result.error, AuthorizationError)
    assert recording.calls == []


async def test_empty_window_is_rejected(store, admin_ctx):
    result = await get_available_employees(admin_ctx, store, at(11), at(11))

    assert isinstance(result.error, ValidationError)


async def test_store_failure_becomes_error(store, seed_users, admin_ctx):
    recording = RecordingStore(store, fail_on={"read_many"})

    result = await get_available_employees(admin_ctx, recording, at(10), at(11))

    assert not result.ok
    assert isinstance(result.error, UpstreamError)


class ShiftsReadFails(RecordingStore):
    async def read_many(self, table, filters=()):
        if table == "shifts":
            self.calls.append(("read_many", table, filters))
            raise UpstreamError("shifts unavailable")
        return await super().read_many(table, filters)


async def test_shift_read_failure_after_employee_read(store, seed_users, admin_ctx):
    recording = ShiftsReadFails(store)

    result = await get_available_employees(admin_ctx, recording, at(10), at(11))

    assert not result.ok
    assert isinstance(result.error, UpstreamError)
    assert result.message == "shifts unavailable"
    assert [call[1] for call in recording.calls] == ["users", "shifts"]
