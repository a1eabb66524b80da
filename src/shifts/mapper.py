import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from src.errors import ValidationError
from src.shifts.models import ShiftStatus
from src.shifts.schemas import ShiftDraft, ShiftOut
from src.users.mapper import as_text

logger = logging.getLogger(__name__)


def to_utc_naive(value: datetime) -> datetime:
    """Shift windows are stored as naive UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _when(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if value is None:
        raise ValidationError("Shift row has no start/end time")
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid shift time: {value}")


def _status(value: Any) -> ShiftStatus:
    try:
        return ShiftStatus(as_text(value))
    except ValueError:
        return ShiftStatus.scheduled


def shift_to_model(row: Mapping[str, Any]) -> ShiftOut:
    return ShiftOut(
        id=as_text(row.get("id")),
        employee_id=as_text(row.get("employee_id")),
        start_time=_when(row.get("start_time")),
        end_time=_when(row.get("end_time")),
        position=as_text(row.get("position")),
        department=as_text(row.get("department")),
        notes=as_text(row.get("notes")),
        status=_status(row.get("status")),
        location=as_text(row.get("location")),
        requirements=as_text(row.get("requirements")),
    )


def shifts_to_models(rows: Iterable[Mapping[str, Any]]) -> list[ShiftOut]:
    """Rows without a start or end time are skipped."""
    shifts = []
    for row in rows:
        if not row:
            continue
        if row.get("start_time") is None or row.get("end_time") is None:
            logger.warning("Skipping shift %s without start/end time", row.get("id"))
            continue
        shifts.append(shift_to_model(row))
    return shifts


def shift_to_storage(employee_id: str, draft: ShiftDraft) -> dict[str, Any]:
    row = {
        "employee_id": employee_id,
        "start_time": to_utc_naive(draft.start_time),
        "end_time": to_utc_naive(draft.end_time),
        "status": (draft.status or ShiftStatus.scheduled).value,
    }
    for column in ("position", "department", "notes", "location", "requirements"):
        value = getattr(draft, column)
        if value is not None:
            row[column] = value
    return row
