from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import ValidationError as PydanticValidationError

from src.auth.context import AuthContext
from src.auth.dependencies import get_auth_context
from src.storage.base import Cache, ObjectStore, RecordStore
from src.storage.cache import EMPLOYEES_KEY, employee_key
from src.storage.dependencies import get_cache, get_object_store, get_record_store
from src.users import service
from src.users.schemas import CamelModel, Employee, EmployeeCreate, EmployeePatch, ProfilePatch
from src.users.sequencer import EmployeeMutationSequencer, MutationOutcome, MutationState, PhotoUpload
from src.utils.responses import unwrap

router = APIRouter(tags=["Employees"])
profile_router = APIRouter(tags=["Profile"])


class MutationOutcomeOut(CamelModel):
    state: MutationState
    employee: Optional[Employee] = None
    avatar_url: Optional[str] = None
    photo_error: Optional[str] = None
    message: str


def get_sequencer(
    store: RecordStore = Depends(get_record_store),
    objects: ObjectStore = Depends(get_object_store),
    cache: Cache = Depends(get_cache),
) -> EmployeeMutationSequencer:
    return EmployeeMutationSequencer(store, objects, cache)


def _parse(schema, data: str):
    try:
        return schema.model_validate_json(data or "{}")
    except PydanticValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))


async def _photo(photo: Optional[UploadFile]) -> Optional[PhotoUpload]:
    if photo is None or not photo.filename:
        return None
    return PhotoUpload(filename=photo.filename, content=await photo.read())


def _outcome_response(outcome: MutationOutcome) -> MutationOutcomeOut:
    if outcome.state == MutationState.UPDATE_FAILED:
        raise HTTPException(status_code=outcome.update_error.status_code, detail=outcome.update_error.message)
    if outcome.partial:
        message = "Employee updated, but the profile photo could not be uploaded"
    elif outcome.state == MutationState.UPLOAD_SUCCEEDED:
        message = "Employee and profile photo updated successfully"
    else:
        message = "Employee updated successfully"
    return MutationOutcomeOut(
        state=outcome.state,
        employee=outcome.employee,
        avatar_url=outcome.avatar_url,
        photo_error=outcome.upload_error.message if outcome.upload_error else None,
        message=message,
    )


@router.get("/")
async def employee_list(
    q: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
    cache: Cache = Depends(get_cache),
):
    if department:
        return unwrap(await service.filter_by_department(ctx, store, cache, department))
    if q:
        return unwrap(await service.search_employees(ctx, store, cache, q))
    return unwrap(await service.list_employees(ctx, store, cache))


@router.post("/", status_code=201)
async def employee_create(
    data: EmployeeCreate,
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
    cache: Cache = Depends(get_cache),
):
    return unwrap(await service.create_employee(ctx, store, cache, data))


@router.get("/{employee_id}")
async def employee_detail(
    employee_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
    cache: Cache = Depends(get_cache),
):
    return unwrap(await service.get_employee(ctx, store, cache, employee_id))


@router.patch("/{employee_id}", response_model=MutationOutcomeOut)
async def employee_update(
    employee_id: str,
    data: str = Form("{}"),
    photo: Optional[UploadFile] = File(None),
    ctx: AuthContext = Depends(get_auth_context),
    sequencer: EmployeeMutationSequencer = Depends(get_sequencer),
):
    patch = _parse(EmployeePatch, data)
    outcome = await sequencer.update(ctx, employee_id, patch.to_update(), photo=await _photo(photo))
    return _outcome_response(outcome)


@router.post("/{employee_id}/photo")
async def employee_photo_upload(
    employee_id: str,
    photo: UploadFile = File(...),
    ctx: AuthContext = Depends(get_auth_context),
    sequencer: EmployeeMutationSequencer = Depends(get_sequencer),
):
    upload = await _photo(photo)
    if upload is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    result = await service.upload_profile_photo(
        ctx, sequencer.store, sequencer.objects, employee_id, upload.filename, upload.content, bucket=sequencer.bucket,
    )
    url = unwrap(result)
    await sequencer.cache.invalidate(employee_key(employee_id))
    await sequencer.cache.invalidate(EMPLOYEES_KEY)
    return {"avatarUrl": url, "message": result.message}


@router.delete("/{employee_id}")
async def employee_delete(
    employee_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    sequencer: EmployeeMutationSequencer = Depends(get_sequencer),
):
    result = await sequencer.delete(ctx, employee_id)
    return {"id": unwrap(result), "message": result.message}


@profile_router.get("/")
async def profile_detail(
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
    cache: Cache = Depends(get_cache),
):
    return unwrap(await service.get_employee(ctx, store, cache, ctx.user.id))


@profile_router.patch("/", response_model=MutationOutcomeOut)
async def profile_update(
    data: str = Form("{}"),
    photo: Optional[UploadFile] = File(None),
    ctx: AuthContext = Depends(get_auth_context),
    sequencer: EmployeeMutationSequencer = Depends(get_sequencer),
):
    patch = _parse(ProfilePatch, data)
    outcome = await sequencer.update(
        ctx, ctx.user.id, patch.to_update(), photo=await _photo(photo), allow_self=True,
    )
    return _outcome_response(outcome)
