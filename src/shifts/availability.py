"""Which employees are free for a proposed shift window.

Two windows ``[a, b)`` and ``[c, d)`` conflict iff ``a < d and c < b``; a shift
ending exactly when the window starts is not a conflict.

The employee read and the shift read are separate queries, so a shift created
in between is not seen. The answer is a best-effort hint for the assignment
form, not a reservation.
"""
from datetime import datetime

from src.auth.context import AuthContext
from src.errors import Ok, ValidationError, as_result
from src.shifts.mapper import to_utc_naive, shifts_to_models
from src.storage.base import RecordStore, eq, gt, lt
from src.users.mapper import to_models
from src.users.schemas import UserRole


def shifts_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and b_start < a_end


def overlap_filters(start: datetime, end: datetime) -> list:
    return [lt("start_time", end), gt("end_time", start)]


@as_result
async def get_available_employees(ctx: AuthContext, store: RecordStore, start_time: datetime, end_time: datetime):
    ctx.require_admin()
    start, end = to_utc_naive(start_time), to_utc_naive(end_time)
    if start >= end:
        raise ValidationError("Start time must be before end time")

    employees = to_models(await store.read_many("users", [eq("role", UserRole.EMPLOYEE.value)]))
    if not employees:
        return Ok([], "0 employees available for assignment")

    shifts = shifts_to_models(await store.read_many("shifts", overlap_filters(start, end)))
    busy = {
        shift.employee_id
        for shift in shifts
        if shifts_overlap(shift.start_time, shift.end_time, start, end)
    }
    available = [employee for employee in employees if employee.id not in busy]
    return Ok(available, f"{len(available)} employees available for assignment")
