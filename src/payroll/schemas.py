from datetime import date
from decimal import Decimal
from enum import Enum

from src.users.schemas import CamelModel


class PayPeriodStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"


class PayrollStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    paid = "paid"


class PayPeriod(CamelModel):
    id: str
    start_date: date
    end_date: date
    status: PayPeriodStatus


class PayrollRecord(CamelModel):
    id: str
    employee_id: str
    pay_period_id: str
    regular_hours: Decimal
    overtime_hours: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    status: PayrollStatus
