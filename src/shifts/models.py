import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Text, CheckConstraint, Index
from sqlalchemy.orm import backref, relationship
from src.database import Base


class ShiftStatus(str, enum.Enum):
    scheduled = "scheduled"
    completed = "completed"
    missed = "missed"
    pending = "pending"
    approved = "approved"
    cancelled = "cancelled"


class Shift(Base):
    __tablename__ = "shifts"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_shift_start_before_end"),
        Index("ix_shifts_employee_window", "employee_id", "start_time", "end_time"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    employee_id = Column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    position = Column(String, nullable=True)
    department = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(Enum(ShiftStatus, name="shift_status"), nullable=False, default=ShiftStatus.scheduled)
    location = Column(String, nullable=True)
    requirements = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    employee = relationship("User", backref=backref("shifts", passive_deletes=True))
