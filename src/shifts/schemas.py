from datetime import datetime
from typing import List, Optional

from pydantic import Field

from src.shifts.models import ShiftStatus
from src.users.schemas import CamelModel


class ShiftOut(CamelModel):
    id: str
    employee_id: str
    start_time: datetime
    end_time: datetime
    position: str = ""
    department: str = ""
    notes: str = ""
    status: ShiftStatus = ShiftStatus.scheduled
    location: str = ""
    requirements: str = ""


class ShiftDraft(CamelModel):
    start_time: datetime
    end_time: datetime
    position: Optional[str] = None
    department: Optional[str] = None
    notes: Optional[str] = None
    status: ShiftStatus = ShiftStatus.scheduled
    location: Optional[str] = None
    requirements: Optional[str] = None


class BulkAssignIn(ShiftDraft):
    employee_ids: List[str] = Field(default_factory=list)


class ShiftPatch(CamelModel):
    """Partial shift update; only the fields sent are written."""

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    position: Optional[str] = None
    department: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[ShiftStatus] = None
    location: Optional[str] = None
    requirements: Optional[str] = None
