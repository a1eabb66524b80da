"""Employee directory: reads, creation and the single-step writes the
mutation sequencer is built from."""
import logging
from decimal import Decimal, InvalidOperation
from typing import Awaitable, Callable

from passlib.context import CryptContext
from pydantic.networks import validate_email

from src.auth.context import AuthContext
from src.config import PROFILE_PHOTO_BUCKET
from src.errors import Ok, ValidationError, as_result
from src.storage.base import Cache, ObjectStore, RecordStore, any_of, eq, escape_like, ilike
from src.storage.cache import (
    EMPLOYEES_KEY,
    employee_key,
    employees_department_key,
    employees_search_key,
)
from src.storage.objects import photo_object_key
from src.users.mapper import to_model, to_models, update_to_storage
from src.users.schemas import Employee, EmployeeCreate, EmployeeUpdate, UserRole
from src.utils.field_update import CLEAR, SetValue

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def _cached_list(cache: Cache, key: str, load: Callable[[], Awaitable[list]]) -> list[Employee]:
    cached = await cache.get(key)
    if cached is not None:
        return [Employee.model_validate(item) for item in cached]
    employees = await load()
    await cache.set(key, [e.model_dump(mode="json") for e in employees])
    return employees


@as_result
async def list_employees(ctx: AuthContext, store: RecordStore, cache: Cache):
    ctx.require_admin()

    async def load():
        return to_models(await store.read_many("users"))

    employees = await _cached_list(cache, EMPLOYEES_KEY, load)
    return Ok(employees, f"Found {len(employees)} employees")


@as_result
async def get_employee(ctx: AuthContext, store: RecordStore, cache: Cache, employee_id: str):
    ctx.require_self_or_admin(employee_id)
    cached = await cache.get(employee_key(employee_id))
    if cached is not None:
        return Ok(Employee.model_validate(cached), "Employee found")
    employee = to_model(await store.read_one("users", employee_id))
    await cache.set(employee_key(employee_id), employee.model_dump(mode="json"))
    return Ok(employee, "Employee found")


@as_result
async def search_employees(ctx: AuthContext, store: RecordStore, cache: Cache, query: str):
    ctx.require_admin()
    query = (query or "").strip()
    if not query:
        return await list_employees(ctx, store, cache)

    pattern = f"%{escape_like(query.lower())}%"

    async def load():
        rows = await store.read_many("users", [
            any_of(ilike("first_name", pattern), ilike("last_name", pattern), ilike("email", pattern)),
        ])
        return to_models(rows)

    return await _cached_list(cache, employees_search_key(query), load)


@as_result
async def filter_by_department(ctx: AuthContext, store: RecordStore, cache: Cache, department: str):
    ctx.require_admin()

    async def load():
        return to_models(await store.read_many("users", [eq("department", department)]))

    return await _cached_list(cache, employees_department_key(department), load)


def _address_columns(data: EmployeeCreate) -> dict:
    if data.address is None:
        return {}
    return {
        col: value
        for col, value in data.address.model_dump().items()
        if value is not None
    }


async def _insert_employee(store: RecordStore, cache: Cache, data: EmployeeCreate, role: UserRole) -> Employee:
    existing = await store.read_many("users", [eq("email", str(data.email))])
    if existing:
        raise ValidationError("User with this email already exists")

    row = {
        "email": str(data.email),
        "first_name": data.first_name,
        "last_name": data.last_name,
        "role": role.value,
        "employee_id": data.employee_id,
        "position": data.position,
        "department": data.department,
        "hourly_rate": data.hourly_rate,
        "phone_number": data.phone_number,
        **_address_columns(data),
    }
    if data.password:
        row["hashed_password"] = pwd_context.hash(data.password)

    created = await store.insert("users", [row])
    await cache.invalidate(EMPLOYEES_KEY)
    return to_model(created[0])


@as_result
async def create_employee(ctx: AuthContext, store: RecordStore, cache: Cache, data: EmployeeCreate):
    ctx.require_admin()
    employee = await _insert_employee(store, cache, data, data.role)
    logger.info("Employee %s created by %s", employee.id, ctx.user.id)
    return Ok(employee, "Employee created successfully")


@as_result
async def register_employee(store: RecordStore, cache: Cache, data: EmployeeCreate):
    """Self-service sign-up. The role requested in the payload is ignored."""
    employee = await _insert_employee(store, cache, data, UserRole.EMPLOYEE)
    logger.info("Employee %s registered", employee.id)
    return Ok(employee, "Registration successful")


def check_update(update: EmployeeUpdate) -> None:
    if update.email is CLEAR or update.role is CLEAR:
        raise ValidationError("Email and role cannot be cleared")
    if isinstance(update.email, SetValue):
        try:
            validate_email(str(update.email.value))
        except ValueError:
            raise ValidationError(f"Invalid email: {update.email.value}")
    if isinstance(update.role, SetValue):
        try:
            UserRole(update.role.value)
        except ValueError:
            raise ValidationError(f"Unknown role: {update.role.value}")
    if isinstance(update.hourly_rate, SetValue):
        try:
            rate = Decimal(str(update.hourly_rate.value))
        except (InvalidOperation, ValueError):
            raise ValidationError("Hourly rate must be a number")
        if not rate.is_finite() or rate < 0:
            raise ValidationError("Hourly rate must be non-negative")


@as_result
async def update_employee(
    ctx: AuthContext,
    store: RecordStore,
    employee_id: str,
    update: EmployeeUpdate,
    allow_self: bool = False,
):
    if not employee_id:
        raise ValidationError("Employee id is required")
    if allow_self:
        ctx.require_self_or_admin(employee_id)
    else:
        ctx.require_admin()
    check_update(update)

    values = update_to_storage(update)
    if not values:
        row = await store.read_one("users", employee_id)
    else:
        row = await store.update("users", employee_id, values)
    logger.info("Employee %s updated (%s)", employee_id, ", ".join(sorted(values)) or "no changes")
    return Ok(to_model(row), "Employee updated successfully")


@as_result
async def upload_profile_photo(
    ctx: AuthContext,
    store: RecordStore,
    objects: ObjectStore,
    employee_id: str,
    filename: str,
    content: bytes,
    bucket: str = PROFILE_PHOTO_BUCKET,
):
    ctx.require_self_or_admin(employee_id)
    if not content:
        raise ValidationError("Uploaded file is empty")

    key = photo_object_key(employee_id, filename)
    url = await objects.put(bucket, key, content)
    await store.update("users", employee_id, {"avatar_url": url})
    logger.info("Profile photo for %s stored at %s", employee_id, key)
    return Ok(url, "Profile photo uploaded successfully")
