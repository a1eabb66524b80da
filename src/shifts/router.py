from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.auth.context import AuthContext
from src.auth.dependencies import get_auth_context
from src.shifts import service
from src.shifts.availability import get_available_employees
from src.shifts.schemas import BulkAssignIn, ShiftDraft, ShiftPatch
from src.storage.base import RecordStore
from src.storage.dependencies import get_record_store
from src.utils.responses import unwrap

router = APIRouter(tags=["Shifts"])


@router.get("/")
async def shift_list(
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
):
    return unwrap(await service.list_shifts(ctx, store))


@router.get("/available-employees")
async def available_employees(
    start_time: datetime = Query(..., alias="startTime"),
    end_time: datetime = Query(..., alias="endTime"),
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
):
    result = await get_available_employees(ctx, store, start_time, end_time)
    return {"data": unwrap(result), "message": result.message}


@router.get("/employee/{employee_id}")
async def employee_shifts(
    employee_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
):
    return unwrap(await service.get_employee_shifts(ctx, store, employee_id))


@router.get("/date/{start_date}")
async def shifts_by_date(
    start_date: date,
    end_date: Optional[date] = Query(None, alias="endDate"),
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
):
    return unwrap(await service.get_shifts_by_date(ctx, store, start_date, end_date))


@router.post("/assign/{employee_id}", status_code=201)
async def assign_shift(
    employee_id: str,
    draft: ShiftDraft,
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
):
    result = await service.assign_shift_to_user(ctx, store, employee_id, draft)
    return {"data": unwrap(result), "message": result.message}


@router.post("/bulk-assign", status_code=201)
async def bulk_assign_shift(
    data: BulkAssignIn,
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
):
    draft = ShiftDraft.model_validate(data.model_dump(exclude={"employee_ids"}))
    result = await service.bulk_assign_shift(ctx, store, data.employee_ids, draft)
    return {"data": unwrap(result), "message": result.message}


@router.patch("/{shift_id}")
async def update_shift(
    shift_id: str,
    patch: ShiftPatch,
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
):
    result = await service.update_shift(ctx, store, shift_id, patch)
    return {"data": unwrap(result), "message": result.message}


@router.delete("/{shift_id}")
async def delete_shift(
    shift_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
):
    result = await service.delete_shift(ctx, store, shift_id)
    return {"id": unwrap(result), "message": result.message}
