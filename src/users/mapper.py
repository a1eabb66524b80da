"""Conversion between ``users`` rows and the ``Employee`` view model.

Rows are flat, snake_case and nullable. The model is structured and fully
defaulted, so nothing downstream has to guard against ``None``.
"""
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterable, Mapping

from src.users.schemas import Address, Employee, EmployeeUpdate, UserRole
from src.utils.field_update import CLEAR, SetValue

# model attribute -> storage column
PROFILE_COLUMNS = {
    "email": "email",
    "first_name": "first_name",
    "last_name": "last_name",
    "role": "role",
    "employee_id": "employee_id",
    "position": "position",
    "department": "department",
    "hourly_rate": "hourly_rate",
    "phone_number": "phone_number",
    "avatar": "avatar_url",
}

ADDRESS_COLUMNS = {
    "street": "street",
    "city": "city",
    "state": "state",
    "country": "country",
    "zip_code": "zip_code",
}


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _rate(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not rate.is_finite() or rate < 0:
        return Decimal("0")
    return rate


def _role(value: Any) -> UserRole:
    try:
        return UserRole(as_text(value))
    except ValueError:
        return UserRole.EMPLOYEE


def to_model(row: Mapping[str, Any]) -> Employee:
    address = Address(**{attr: as_text(row.get(col)) for attr, col in ADDRESS_COLUMNS.items()})
    return Employee(
        id=as_text(row.get("id")),
        email=as_text(row.get("email")),
        first_name=as_text(row.get("first_name")),
        last_name=as_text(row.get("last_name")),
        role=_role(row.get("role")),
        employee_id=as_text(row.get("employee_id")),
        position=as_text(row.get("position")),
        department=as_text(row.get("department")),
        hourly_rate=_rate(row.get("hourly_rate")),
        phone_number=as_text(row.get("phone_number")),
        avatar=as_text(row.get("avatar_url")),
        address=address,
    )


def to_models(rows: Iterable[Mapping[str, Any]]) -> list[Employee]:
    return [to_model(row) for row in rows if row]


def to_storage(employee: Employee) -> dict[str, Any]:
    row = {"id": employee.id} if employee.id else {}
    for attr, col in PROFILE_COLUMNS.items():
        value = getattr(employee, attr)
        row[col] = value.value if isinstance(value, Enum) else value
    for attr, col in ADDRESS_COLUMNS.items():
        row[col] = getattr(employee.address, attr)
    return row


def _apply(row: dict, column: str, update: Any) -> None:
    if update is CLEAR:
        row[column] = None
    elif isinstance(update, SetValue):
        value = update.value
        row[column] = value.value if isinstance(value, Enum) else value


def update_to_storage(update: EmployeeUpdate) -> dict[str, Any]:
    """Only emit columns the update touches; untouched address parts stay out."""
    row: dict[str, Any] = {}
    for attr, col in PROFILE_COLUMNS.items():
        _apply(row, col, getattr(update, attr))
    for attr, col in ADDRESS_COLUMNS.items():
        _apply(row, col, getattr(update.address, attr))
    return row
