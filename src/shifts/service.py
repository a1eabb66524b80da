import logging
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from src.auth.context import AuthContext
from src.errors import NotFoundError, Ok, ValidationError, as_result
from src.shifts.mapper import shift_to_model, shift_to_storage, shifts_to_models, to_utc_naive
from src.shifts.schemas import ShiftDraft, ShiftPatch
from src.storage.base import RecordStore, eq, gte, in_, lt

logger = logging.getLogger(__name__)


def check_draft(draft: ShiftDraft) -> None:
    if to_utc_naive(draft.start_time) >= to_utc_naive(draft.end_time):
        raise ValidationError("Shift start time must be before end time")


@as_result
async def assign_shift_to_user(ctx: AuthContext, store: RecordStore, employee_id: str, draft: ShiftDraft):
    ctx.require_admin()
    if not employee_id:
        raise ValidationError("Employee id is required")
    check_draft(draft)
    await store.read_one("users", employee_id)

    created = await store.insert("shifts", [shift_to_storage(employee_id, draft)])
    logger.info("Shift %s assigned to %s", created[0]["id"], employee_id)
    return Ok(shifts_to_models(created)[0], "Shift assigned successfully")


@as_result
async def bulk_assign_shift(ctx: AuthContext, store: RecordStore, employee_ids: Sequence[str], draft: ShiftDraft):
    ctx.require_admin()
    ids = list(dict.fromkeys(i for i in employee_ids if i))
    if not ids:
        raise ValidationError("No users selected for shift assignment")
    check_draft(draft)

    found = {row["id"] for row in await store.read_many("users", [in_("id", ids)])}
    missing = [i for i in ids if i not in found]
    if missing:
        raise NotFoundError(f"Unknown employees: {', '.join(missing)}")

    created = await store.insert("shifts", [shift_to_storage(i, draft) for i in ids])
    logger.info("Bulk assigned %d shifts", len(created))
    return Ok(shifts_to_models(created), f"Successfully assigned shifts to {len(ids)} users")


@as_result
async def list_shifts(ctx: AuthContext, store: RecordStore):
    user = ctx.require_authenticated()
    filters = [] if ctx.is_admin else [eq("employee_id", user.id)]
    return shifts_to_models(await store.read_many("shifts", filters))


@as_result
async def get_employee_shifts(ctx: AuthContext, store: RecordStore, employee_id: str):
    ctx.require_self_or_admin(employee_id)
    return shifts_to_models(await store.read_many("shifts", [eq("employee_id", employee_id)]))


@as_result
async def get_shifts_by_date(ctx: AuthContext, store: RecordStore, start_date: date, end_date: Optional[date] = None):
    """Shifts starting on ``start_date``, or on any day up to ``end_date`` inclusive."""
    user = ctx.require_authenticated()
    since = datetime.combine(start_date, time.min)
    until = datetime.combine(end_date or start_date, time.min) + timedelta(days=1)
    filters = [gte("start_time", since), lt("start_time", until)]
    if not ctx.is_admin:
        filters.append(eq("employee_id", user.id))
    return shifts_to_models(await store.read_many("shifts", filters))


async def _existing_shift(store: RecordStore, shift_id: str) -> dict:
    try:
        return await store.read_one("shifts", shift_id)
    except NotFoundError:
        raise NotFoundError("Shift not found")


@as_result
async def update_shift(ctx: AuthContext, store: RecordStore, shift_id: str, patch: ShiftPatch):
    ctx.require_admin()
    row = await _existing_shift(store, shift_id)

    values = patch.model_dump(exclude_unset=True)
    for column in ("start_time", "end_time", "status"):
        if column in values and values[column] is None:
            raise ValidationError(f"{column} cannot be cleared")
    for column in ("start_time", "end_time"):
        if column in values:
            values[column] = to_utc_naive(values[column])
    if "status" in values:
        values["status"] = values["status"].value

    merged = shift_to_model({**row, **values})
    if merged.start_time >= merged.end_time:
        raise ValidationError("Shift start time must be before end time")

    if values:
        row = await store.update("shifts", shift_id, values)
    logger.info("Shift %s updated (%s)", shift_id, ", ".join(sorted(values)) or "no changes")
    return Ok(shift_to_model(row), "Shift updated successfully")


@as_result
async def delete_shift(ctx: AuthContext, store: RecordStore, shift_id: str):
    ctx.require_admin()
    await _existing_shift(store, shift_id)
    await store.delete("shifts", shift_id)
    logger.info("Shift %s deleted by %s", shift_id, ctx.user.id)
    return Ok(shift_id, "Shift deleted successfully")
